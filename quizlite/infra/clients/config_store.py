# START OF FILE: quizlite/infra/clients/config_store.py

import json
from pathlib import Path
from typing import Any, Dict, Union

from quizlite.domain.errors import ConfigError
from quizlite.domain.models import QuizConfig
from quizlite.shared.config import QUIZ_CONFIG_PATH
from quizlite.shared.logger import logger


class JsonConfigStore:
    """
    Single JSON document on disk. Every load re-reads the file so edits made
    outside the process apply without a restart. Saves overwrite the whole
    document and are not coordinated: with two concurrent editors the last
    writer wins.
    """

    def __init__(self, path: Union[str, Path] = QUIZ_CONFIG_PATH):
        self.path = Path(path)
        logger.info(f"JsonConfigStore initialized for {self.path}")

    def load_document(self) -> Dict[str, Any]:
        try:
            raw = self.path.read_text(encoding='utf-8')
        except FileNotFoundError as e:
            raise ConfigError(f"Quiz config not found at {self.path}") from e
        except OSError as e:
            raise ConfigError(f"Quiz config at {self.path} is unreadable: {e}") from e

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Quiz config at {self.path} is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise ConfigError(f"Quiz config at {self.path} must be a JSON object.")
        return document

    def load(self) -> QuizConfig:
        document = self.load_document()
        try:
            return QuizConfig.from_dict(document)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Quiz config at {self.path} is malformed: {e}") from e

    def save(self, document: Union[QuizConfig, Dict[str, Any]]) -> None:
        if isinstance(document, QuizConfig):
            document = document.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding='utf-8')
        logger.info(f"Quiz config written to {self.path} ({len(document.get('questions', []))} question(s)).")

# END OF FILE: quizlite/infra/clients/config_store.py
