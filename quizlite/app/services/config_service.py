# START OF FILE: quizlite/app/services/config_service.py

from typing import Any, Dict

from quizlite.domain.errors import ValidationError
from quizlite.domain.models import QuizConfig
from quizlite.infra.clients.config_store import JsonConfigStore
from quizlite.shared.logger import logger

REQUIRED_ARRAY_FIELDS = ('questions', 'rules')


def validate_document(data: Any) -> QuizConfig:
    """Checks an admin-submitted quiz document. Raises ValidationError on the first problem."""
    if not isinstance(data, dict):
        raise ValidationError("Config must be a JSON object.")

    missing = [name for name in REQUIRED_ARRAY_FIELDS if not isinstance(data.get(name), list)]
    if missing:
        raise ValidationError(f"Config must include array field(s): {', '.join(missing)}.")
    if 'combos' in data and not isinstance(data['combos'], list):
        raise ValidationError("'combos' must be an array when present.")

    seen_ids = set()
    for i, question in enumerate(data['questions']):
        if not isinstance(question, dict):
            raise ValidationError(f"Question #{i + 1} must be an object.")
        question_id = question.get('id')
        if question_id in (None, ''):
            raise ValidationError(f"Question #{i + 1} has no 'id'.")
        question_id = str(question_id)
        if question_id in seen_ids:
            raise ValidationError(f"Question id '{question_id}' is used more than once.")
        seen_ids.add(question_id)
        if not isinstance(question.get('options', []), list):
            raise ValidationError(f"Question '{question_id}': 'options' must be an array.")
        if not isinstance(question.get('stops', []), list):
            raise ValidationError(f"Question '{question_id}': 'stops' must be an array.")
        for j, option in enumerate(question.get('options', [])):
            _check_option(question_id, j, option)

    for i, combo in enumerate(data.get('combos', [])):
        if not isinstance(combo, dict) or not isinstance(combo.get('when', {}), dict):
            raise ValidationError(f"Combo #{i + 1} must be an object with a 'when' mapping.")

    try:
        return QuizConfig.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise ValidationError(f"Config is malformed: {e}") from e


def _check_option(question_id: str, index: int, option: Any) -> None:
    if not isinstance(option, dict):
        raise ValidationError(f"Question '{question_id}': option #{index + 1} must be an object.")
    group = option.get('group')
    if group is None:
        return
    # tone-faces groups index the tone slider
    try:
        valid = not isinstance(group, bool) and int(group) >= 0
    except (TypeError, ValueError):
        valid = False
    if not valid:
        raise ValidationError(
            f"Question '{question_id}': option #{index + 1} 'group' must be a non-negative integer, got {group!r}."
        )


class ConfigService:
    """Admin read/replace of the quiz document."""

    def __init__(self, store: JsonConfigStore):
        self.store = store
        logger.info("ConfigService initialized.")

    def get_document(self) -> Dict[str, Any]:
        return self.store.load_document()

    def get_config(self) -> QuizConfig:
        return self.store.load()

    def replace_document(self, data: Any) -> QuizConfig:
        config = validate_document(data)
        self.store.save(data)
        logger.info(
            f"Quiz config replaced: {len(config.questions)} question(s), "
            f"{len(config.rules)} rule(s), {len(config.combos)} combo(s)."
        )
        return config

# END OF FILE: quizlite/app/services/config_service.py
