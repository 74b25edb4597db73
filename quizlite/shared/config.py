# START OF FILE: quizlite/shared/config.py

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# --- Shopify ---
SHOPIFY_SHOP = os.getenv('SHOPIFY_SHOP', '')
STOREFRONT_API_TOKEN = os.getenv('STOREFRONT_API_TOKEN', '')
STOREFRONT_API_VERSION = os.getenv('STOREFRONT_API_VERSION', '2024-07')
CATALOG_TIMEOUT_SECONDS = float(os.getenv('CATALOG_TIMEOUT_SECONDS', 8))

# --- Quiz document ---
QUIZ_CONFIG_PATH = Path(os.getenv('QUIZ_CONFIG_PATH', PROJECT_ROOT / 'data' / 'quiz.json'))
DEFAULT_RESULTS_TITLE = "Your best shade matches"

# Shared secret for the admin JSON editor. Empty disables the admin surface.
ADMIN_SECRET = os.getenv('ADMIN_SECRET', '')

# --- Telegram ---
TELEGRAM_TOKEN = os.getenv('TELEGRAM_TOKEN', '')
ADMIN_CHAT_ID = os.getenv('ADMIN_CHAT_ID', '')

# --- Deployment & Runtime ---
PORT = int(os.environ.get('PORT', 3000))
PUBLIC_URL = os.getenv('PUBLIC_URL', f"http://localhost:{PORT}")
RUN_MODE = os.getenv('RUN_MODE', 'WEBHOOK')
APP_PROXY_PREFIX = "/apps/quiz/proxy"

# --- Conversation States ---
# Admin quiz config management
CONFIG_ACTION, CONFIG_UPLOAD_FILE = range(2)

# END OF FILE: quizlite/shared/config.py
