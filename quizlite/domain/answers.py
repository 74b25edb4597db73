# START OF FILE: quizlite/domain/answers.py
"""
AnswerMap: what the wizard accumulates and the resolver reads.

Every entry is either a Scalar or a MultiSelect. Synthetic keys written by
composite layouts (tone, face, undertone) are ordinary entries.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

TONE_KEY = "tone"
FACE_KEY = "face"
UNDERTONE_KEY = "undertone"


def normalize_value(value: Any) -> str:
    """String form used for every answer/rule comparison."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Scalar:
    value: str

    @property
    def values(self) -> Tuple[str, ...]:
        return (self.value,)

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class MultiSelect:
    items: Tuple[str, ...] = ()

    @property
    def values(self) -> Tuple[str, ...]:
        return self.items

    def to_json(self) -> List[str]:
        return list(self.items)


AnswerValue = Union[Scalar, MultiSelect]


class AnswerMap:
    """Insertion-ordered mapping of answer key -> Scalar | MultiSelect."""

    def __init__(self, entries: Optional[Dict[str, AnswerValue]] = None):
        self._entries: Dict[str, AnswerValue] = dict(entries or {})

    # --- construction ---

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "AnswerMap":
        """Builds a map from plain JSON-ish values (lists become MultiSelect)."""
        answers = cls()
        for key, value in raw.items():
            if isinstance(value, (list, tuple)):
                answers.set_multi(key, value)
            else:
                answers.set_scalar(key, value)
        return answers

    @classmethod
    def from_pairs(cls, pairs: Iterable[Dict[str, Any]]) -> "AnswerMap":
        """
        Builds a map from the widget's flattened [{questionId, value}, ...] list.
        A question id that appears more than once, or whose value is a list,
        becomes a MultiSelect in first-seen order.
        """
        collected: Dict[str, List[str]] = {}
        multi = set()
        for pair in pairs:
            if not isinstance(pair, dict) or pair.get('questionId') is None:
                continue
            key = str(pair['questionId'])
            value = pair.get('value')
            bucket = collected.setdefault(key, [])
            if bucket:
                multi.add(key)
            if isinstance(value, (list, tuple)):
                multi.add(key)
                bucket.extend(normalize_value(v) for v in value)
            else:
                bucket.append(normalize_value(value))

        answers = cls()
        for key, values in collected.items():
            if key in multi:
                answers.set_multi(key, values)
            else:
                answers.set_scalar(key, values[0])
        return answers

    # --- mutation ---

    def set_scalar(self, key: str, value: Any) -> None:
        self._entries[key] = Scalar(normalize_value(value))

    def set_multi(self, key: str, values: Iterable[Any]) -> None:
        ordered: List[str] = []
        for v in values:
            v = normalize_value(v)
            if v not in ordered:
                ordered.append(v)
        self._entries[key] = MultiSelect(tuple(ordered))

    def toggle(self, key: str, value: Any) -> bool:
        """Adds value to a multi-select entry or removes it if present. Returns the new selected state."""
        value = normalize_value(value)
        current = list(self.values(key))
        if value in current:
            current.remove(value)
            selected = False
        else:
            current.append(value)
            selected = True
        self._entries[key] = MultiSelect(tuple(current))
        return selected

    def clear(self, key: str) -> None:
        self._entries.pop(key, None)

    # --- reads ---

    def values(self, key: str) -> Tuple[str, ...]:
        entry = self._entries.get(key)
        return entry.values if entry is not None else ()

    def scalar(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if isinstance(entry, Scalar):
            return entry.value
        return None

    def matches(self, key: str, expected: Any) -> bool:
        return normalize_value(expected) in self.values(key)

    def has(self, key: str) -> bool:
        return bool(self.values(key))

    def to_dict(self) -> Dict[str, Any]:
        return {key: entry.to_json() for key, entry in self._entries.items()}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AnswerMap({self.to_dict()!r})"

# END OF FILE: quizlite/domain/answers.py
