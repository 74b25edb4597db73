# path: quizlite/api/telegram/admin_handlers.py
import io
import json
from telegram import Update
from telegram.ext import ContextTypes, ConversationHandler
from telegram.constants import ChatAction

from quizlite.app.services.config_service import ConfigService
from quizlite.api.telegram.keyboards import (
    admin_keyboard, cancel_keyboard, config_management_keyboard
)
from quizlite.domain.errors import ConfigError, ValidationError
from quizlite.shared.logger import logger
from quizlite.shared.config import CONFIG_ACTION, CONFIG_UPLOAD_FILE


def is_admin(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """The shared-secret gate for the bot: only ADMIN_CHAT_ID may edit the quiz."""
    admin_chat_id = context.bot_data.get('admin_chat_id')
    return bool(admin_chat_id) and str(update.effective_user.id) == str(admin_chat_id)


async def admin_panel(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not is_admin(update, context): return
    await update.message.reply_text(
        "Welcome to the admin panel!\n\nSend /start to go back to the regular menu.",
        reply_markup=admin_keyboard
    )


async def config_management_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    if not is_admin(update, context): return ConversationHandler.END
    await update.message.reply_text(
        "Quiz config management. Choose an action:",
        reply_markup=config_management_keyboard
    )
    return CONFIG_ACTION


async def config_view(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    query = update.callback_query
    await query.answer()
    config_service: ConfigService = context.application.bot_data['config_service']
    try:
        document = config_service.get_document()
    except ConfigError as e:
        logger.error(f"Admin could not read quiz config: {e}", exc_info=True)
        await query.message.reply_text(f"❌ The current config cannot be read: {e}")
        return CONFIG_ACTION

    pretty_json = json.dumps(document, indent=2, ensure_ascii=False).encode('utf-8')
    await query.message.reply_chat_action(ChatAction.UPLOAD_DOCUMENT)
    await query.message.reply_document(
        document=io.BytesIO(pretty_json),
        filename="quiz.json",
        caption=f"Current quiz config ({len(document.get('questions', []))} question(s))."
    )
    return CONFIG_ACTION


async def config_upload_prompt(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    query = update.callback_query
    await query.answer()
    await query.edit_message_text(
        "Send the new quiz config as a .json file.\n\n"
        "It must be an object with `questions` and `rules` arrays (plus optional `combos` and `resultsTitle`). "
        "The whole document is replaced."
    )
    await query.message.reply_text("Waiting for the file...", reply_markup=cancel_keyboard)
    return CONFIG_UPLOAD_FILE


async def config_receive_file(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    if not update.message.document:
        await update.message.reply_text("Please send a file, not text.")
        return CONFIG_UPLOAD_FILE

    document = update.message.document
    if not (document.file_name or '').lower().endswith('.json'):
        await update.message.reply_text("The file must have a .json extension.")
        return CONFIG_UPLOAD_FILE

    try:
        tg_file = await document.get_file()
        file_content = await tg_file.download_as_bytearray()
        new_config = json.loads(file_content.decode('utf-8'))

        config_service: ConfigService = context.application.bot_data['config_service']
        config = config_service.replace_document(new_config)
        await update.message.reply_text(
            f"✅ Quiz config saved: {len(config.questions)} question(s), "
            f"{len(config.rules)} rule(s), {len(config.combos)} combo(s).",
            reply_markup=admin_keyboard
        )
        return ConversationHandler.END
    except (UnicodeDecodeError, json.JSONDecodeError):
        await update.message.reply_text("❌ The file is not valid JSON. Fix it and send it again.")
        return CONFIG_UPLOAD_FILE
    except ValidationError as e:
        await update.message.reply_text(f"❌ Config rejected, nothing was changed: {e}")
        return CONFIG_UPLOAD_FILE
    except Exception as e:
        logger.error(f"Error processing uploaded quiz config: {e}", exc_info=True)
        await update.message.reply_text(f"❌ Unexpected error: {e}", reply_markup=admin_keyboard)
        return ConversationHandler.END


async def config_back(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    query = update.callback_query
    await query.answer()
    await query.message.delete()
    return ConversationHandler.END


async def config_cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    await update.message.reply_text("Quiz config management cancelled.", reply_markup=admin_keyboard)
    return ConversationHandler.END
# path: quizlite/api/telegram/admin_handlers.py
