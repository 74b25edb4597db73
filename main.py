# path: main.py
import uvicorn
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from telegram import Update
from telegram.ext import (
    Application, CommandHandler, MessageHandler, filters,
    ConversationHandler, CallbackQueryHandler
)

from quizlite.shared.logger import logger
from quizlite.shared.config import (
    PUBLIC_URL, PORT, RUN_MODE, SHOPIFY_SHOP, ADMIN_SECRET, ADMIN_CHAT_ID,
    TELEGRAM_TOKEN, QUIZ_CONFIG_PATH, CONFIG_ACTION, CONFIG_UPLOAD_FILE
)
from quizlite.infra.clients.config_store import JsonConfigStore
from quizlite.infra.clients.storefront_client import StorefrontClient
from quizlite.app.services.config_service import ConfigService
from quizlite.app.services.materializer import ResultMaterializer
from quizlite.app.services.recommendation_service import RecommendationService
from quizlite.api.http.routes import router, health_router
from quizlite.api.telegram import user_handlers, admin_handlers
from quizlite.api.telegram.keyboards import QUIZ_BUTTON, CONFIG_MANAGEMENT_BUTTON, CANCEL_BUTTON

fastapi_app = FastAPI(docs_url=None, redoc_url=None)
fastapi_app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
fastapi_app.include_router(health_router)
fastapi_app.include_router(router)

bot_app: Optional[Application] = None


def build_services() -> Dict[str, Any]:
    store = JsonConfigStore(QUIZ_CONFIG_PATH)
    materializer = ResultMaterializer(StorefrontClient.from_env())
    return {
        'config_service': ConfigService(store),
        'recommendation_service': RecommendationService(store, materializer),
        'shop': SHOPIFY_SHOP,
        'admin_secret': ADMIN_SECRET,
        'admin_chat_id': ADMIN_CHAT_ID,
    }


def register_handlers(app: Application):
    quiz_button_filter = filters.Regex(f'^{QUIZ_BUTTON}$')
    config_button_filter = filters.Regex(f'^{CONFIG_MANAGEMENT_BUTTON}$')
    cancel_filter = filters.Regex(f'^{CANCEL_BUTTON}$')

    config_conv_handler = ConversationHandler(
        entry_points=[MessageHandler(config_button_filter, admin_handlers.config_management_start)],
        states={
            CONFIG_ACTION: [
                CallbackQueryHandler(admin_handlers.config_view, pattern='^config_view$'),
                CallbackQueryHandler(admin_handlers.config_upload_prompt, pattern='^config_upload$'),
                CallbackQueryHandler(admin_handlers.config_back, pattern='^config_back$'),
            ],
            CONFIG_UPLOAD_FILE: [
                MessageHandler(filters.Document.ALL, admin_handlers.config_receive_file)
            ]
        },
        fallbacks=[CommandHandler('cancel', admin_handlers.config_cancel), MessageHandler(cancel_filter, admin_handlers.config_cancel)],
    )

    app.add_handler(CommandHandler("start", user_handlers.start))
    app.add_handler(CommandHandler("quiz", user_handlers.start_quiz))
    app.add_handler(CommandHandler("admin", admin_handlers.admin_panel))
    app.add_handler(config_conv_handler)
    app.add_handler(MessageHandler(quiz_button_filter, user_handlers.start_quiz))
    app.add_handler(CallbackQueryHandler(user_handlers.quiz_callback, pattern='^quiz_'))


async def setup_bot(token: str, services: Dict[str, Any]) -> Application:
    app = Application.builder().token(token).build()
    app.bot_data.update(services)
    register_handlers(app)
    await app.initialize()
    await app.start()
    webhook_url = f"{PUBLIC_URL}/{token}"
    if not (await app.bot.set_webhook(url=webhook_url, allowed_updates=Update.ALL_TYPES)):
        logger.error(f"Failed to set webhook for bot ...{token[-4:]} to {webhook_url}")
    else:
        logger.info(f"Webhook set for bot ...{token[-4:]}")
    return app


@fastapi_app.post("/{bot_token}")
async def handle_webhook(bot_token: str, request: Request):
    if bot_app is not None and bot_token == TELEGRAM_TOKEN:
        update = Update.de_json(await request.json(), bot_app.bot)
        await bot_app.process_update(update)
        return Response(status_code=200)
    return Response(status_code=404)


@fastapi_app.on_event("startup")
async def startup_event():
    global bot_app
    logger.info("Application startup...")
    services = build_services()
    fastapi_app.state.services = services
    if not TELEGRAM_TOKEN:
        logger.warning("TELEGRAM_TOKEN is not set. Running the HTTP proxy only.")
        return
    bot_app = await setup_bot(TELEGRAM_TOKEN, services)
    logger.info("Telegram quiz bot initialized.")


@fastapi_app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown...")
    if bot_app is not None:
        await bot_app.stop()
        await bot_app.shutdown()


def main():
    if RUN_MODE == 'POLLING':
        logger.error("POLLING mode is not supported.")
        return
    logger.info(f"Quiz Lite running on {PUBLIC_URL} (port {PORT})")
    uvicorn.run(app=fastapi_app, host="0.0.0.0", port=PORT)

if __name__ == "__main__":
    main()
# path: main.py
