# path: quizlite/api/telegram/user_handlers.py
from telegram import Update, LinkPreviewOptions
from telegram.ext import ContextTypes
from telegram.constants import ParseMode, ChatAction
from telegram.error import BadRequest, TelegramError

from quizlite.app.services.config_service import ConfigService
from quizlite.app.services.recommendation_service import RecommendationService
from quizlite.app.wizard.session import QuizWizard, WizardState
from quizlite.api.telegram.keyboards import (
    main_keyboard, make_step_keyboard, format_step_text, format_results
)
from quizlite.domain.errors import ConfigError, WizardError
from quizlite.shared.logger import logger

WIZARD_KEY = 'quiz_wizard'


def _step_markup(wizard: QuizWizard):
    view = wizard.view()
    return format_step_text(view), make_step_keyboard(view, wizard.can_go_back, wizard.is_last_step)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    context.user_data.clear()
    await update.message.reply_text(
        "Hi! Answer a few quick questions and we'll match you with products.\n\n"
        "🎯 Tap the button below to start the quiz.",
        reply_markup=main_keyboard
    )


async def start_quiz(update: Update, context: ContextTypes.DEFAULT_TYPE):
    config_service: ConfigService = context.application.bot_data['config_service']
    try:
        config = config_service.get_config()
    except ConfigError as e:
        logger.error(f"Quiz unavailable for user {update.effective_user.id}: {e}", exc_info=True)
        await update.message.reply_text("Sorry, the quiz is unavailable right now. Please try again later.")
        return

    if not config.questions:
        await update.message.reply_text("The quiz has no questions yet.")
        return

    wizard = QuizWizard(config)
    context.user_data[WIZARD_KEY] = wizard
    text, keyboard = _step_markup(wizard)
    await update.message.reply_text(text, reply_markup=keyboard, parse_mode=ParseMode.HTML)


async def quiz_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    wizard: QuizWizard = context.user_data.get(WIZARD_KEY)
    if wizard is None:
        await query.answer("This quiz has expired. Tap the quiz button to start again.", show_alert=True)
        return

    action = query.data
    try:
        if action == 'quiz_next':
            if not wizard.can_go_next:
                await query.answer("Please make a choice first.", show_alert=True)
                return
            wizard.next()
        elif action == 'quiz_prev':
            wizard.previous()
        elif action.startswith('quiz_opt_'):
            wizard.choose(int(action.rsplit('_', 1)[1]))
        elif action.startswith('quiz_pos_'):
            wizard.move_slider(int(action.rsplit('_', 1)[1]))
        else:
            logger.warning(f"Unknown quiz callback '{action}'.")
            await query.answer()
            return
    except WizardError as e:
        logger.warning(f"Rejected quiz action '{action}' from user {query.from_user.id}: {e}")
        await query.answer(str(e), show_alert=True)
        return

    await query.answer()

    if wizard.state is WizardState.SUBMITTING:
        await _submit(update, context, wizard)
        return

    text, keyboard = _step_markup(wizard)
    try:
        await query.edit_message_text(text, reply_markup=keyboard, parse_mode=ParseMode.HTML)
    except BadRequest as e:
        # Re-picking the current choice leaves the message unchanged
        if "not modified" not in str(e).lower():
            raise


async def _submit(update: Update, context: ContextTypes.DEFAULT_TYPE, wizard: QuizWizard):
    query = update.callback_query
    recommendation_service: RecommendationService = context.application.bot_data['recommendation_service']
    try:
        await query.edit_message_text("🔎 Finding your matches...")
        await context.bot.send_chat_action(chat_id=query.message.chat_id, action=ChatAction.TYPING)
    except TelegramError as e:
        logger.warning(f"Could not show progress to user {query.from_user.id}: {e}")

    outcome = await wizard.submit(recommendation_service)
    # Answers live only for one pass through the quiz
    context.user_data.pop(WIZARD_KEY, None)
    logger.info(
        f"Quiz finished for user {query.from_user.id}: "
        f"{len(outcome.products)} product(s), error={outcome.error}"
    )
    await query.edit_message_text(
        format_results(outcome, wizard.results_title, context.bot_data.get('shop')),
        parse_mode=ParseMode.HTML,
        link_preview_options=LinkPreviewOptions(is_disabled=True)
    )
# path: quizlite/api/telegram/user_handlers.py
