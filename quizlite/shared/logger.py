# START OF FILE: quizlite/shared/logger.py

import logging
import os
import sys

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

logger = logging.getLogger("quizlite")
logger.setLevel(LOG_LEVEL)

handler = logging.StreamHandler(sys.stdout)
handler.setLevel(LOG_LEVEL)

formatter = logging.Formatter(
    '%(asctime)s - [%(levelname)s] - %(name)s - (%(filename)s).%(funcName)s(%(lineno)d) - %(message)s'
)
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)

# python-telegram-bot logs every webhook/API round-trip through httpx at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

# END OF FILE: quizlite/shared/logger.py
