# path: scripts/check_quiz_config.py
import argparse
import json
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))
from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from quizlite.app.services.config_service import validate_document
from quizlite.app.services.resolver import resolve
from quizlite.domain.answers import AnswerMap
from quizlite.domain.errors import ValidationError
from quizlite.shared.config import QUIZ_CONFIG_PATH
from quizlite.shared.logger import logger


def parse_answer(raw: str):
    """'concerns=dryness,redness' -> ('concerns', ['dryness', 'redness'])."""
    if '=' not in raw:
        raise argparse.ArgumentTypeError(f"Expected key=value, got '{raw}'.")
    key, value = raw.split('=', 1)
    values = [v for v in value.split(',') if v]
    return key.strip(), values if len(values) > 1 else value


def check(file_path: Path, answers) -> int:
    try:
        document = json.loads(file_path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        return 1
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"{file_path} is not valid JSON: {e}")
        return 1

    try:
        config = validate_document(document)
    except ValidationError as e:
        logger.error(f"{file_path} rejected: {e}")
        return 1

    logger.info(
        f"{file_path} is valid: {len(config.questions)} question(s), "
        f"{len(config.rules)} rule(s), {len(config.combos)} combo(s)."
    )
    if answers:
        answer_map = AnswerMap.from_mapping(dict(answers))
        handles = resolve(answer_map, config)
        print(json.dumps({"answers": answer_map.to_dict(), "recommend": handles}, indent=2, ensure_ascii=False))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate a quiz config and optionally dry-run the recommendation rules.")
    parser.add_argument("file", nargs='?', default=str(QUIZ_CONFIG_PATH), help="Path to the quiz JSON document.")
    parser.add_argument(
        "--answer", "-a", action="append", type=parse_answer, default=[],
        help="Answer to resolve, as key=value (comma-separate multi-select values). Repeatable."
    )
    args = parser.parse_args(argv)
    return check(Path(args.file), args.answer)


if __name__ == "__main__":
    sys.exit(main())
