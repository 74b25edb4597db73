# START OF FILE: quizlite/domain/models.py

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from quizlite.domain.answers import normalize_value


def _array(raw: Dict[str, Any], name: str) -> List[Any]:
    """A missing or null field reads as []; any other non-list is malformed."""
    value = raw.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"'{name}' must be an array, got {type(value).__name__}.")
    return value


def _group(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise TypeError(f"Option group must be an integer, got {raw!r}.")
    return int(raw)


class Layout(str, Enum):
    DEFAULT = "default"
    IMAGE_GRID = "image-grid"
    SLIDER = "slider"
    TONE_FACES = "tone-faces"
    UNDERTONE = "undertone"

    @classmethod
    def parse(cls, raw: Any) -> "Layout":
        # Unknown layouts render as plain radios/checkboxes
        try:
            return cls(raw)
        except ValueError:
            return cls.DEFAULT


@dataclass
class Option:
    value: Union[str, int, float]
    label: str = ""
    image: Optional[str] = None
    color: Optional[str] = None
    desc: Optional[str] = None
    group: Optional[int] = None

    @property
    def key(self) -> str:
        return normalize_value(self.value)

    @property
    def group_index(self) -> int:
        return self.group if self.group is not None else 0

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Option":
        return cls(
            value=raw.get('value', ''),
            label=str(raw.get('label') or ''),
            image=raw.get('image'),
            color=raw.get('color'),
            desc=raw.get('desc'),
            group=_group(raw.get('group')),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {'value': self.value, 'label': self.label}
        for name in ('image', 'color', 'desc', 'group'):
            if getattr(self, name) is not None:
                data[name] = getattr(self, name)
        return data


@dataclass
class Question:
    id: str
    title: str = ""
    subtitle: Optional[str] = None
    layout: Layout = Layout.DEFAULT
    type: str = "single"
    options: List[Option] = field(default_factory=list)
    stops: List[str] = field(default_factory=list)

    @property
    def is_multi(self) -> bool:
        return self.type == "multi"

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Question":
        return cls(
            id=str(raw.get('id', '')),
            title=str(raw.get('title') or ''),
            subtitle=raw.get('subtitle'),
            layout=Layout.parse(raw.get('layout', Layout.DEFAULT.value)),
            type="multi" if raw.get('type') == "multi" else "single",
            options=[Option.from_dict(o) for o in _array(raw, 'options') if isinstance(o, dict)],
            stops=[str(s) for s in _array(raw, 'stops')],
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'title': self.title,
            'layout': self.layout.value,
            'type': self.type,
            'options': [o.to_dict() for o in self.options],
        }
        if self.subtitle is not None:
            data['subtitle'] = self.subtitle
        if self.stops:
            data['stops'] = list(self.stops)
        return data


@dataclass
class Rule:
    question_id: str
    value: Any
    recommend: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Rule":
        recommend = raw.get('recommend')
        return cls(
            question_id=str(raw.get('questionId', '')),
            value=raw.get('value'),
            recommend=[str(h) for h in recommend] if isinstance(recommend, list) else [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'questionId': self.question_id, 'value': self.value, 'recommend': list(self.recommend)}


@dataclass
class Combo:
    when: Dict[str, Any] = field(default_factory=dict)
    recommend: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Combo":
        when = raw.get('when')
        recommend = raw.get('recommend')
        return cls(
            when=dict(when) if isinstance(when, dict) else {},
            recommend=[str(h) for h in recommend] if isinstance(recommend, list) else [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'when': dict(self.when), 'recommend': list(self.recommend)}


@dataclass
class QuizConfig:
    questions: List[Question] = field(default_factory=list)
    rules: List[Rule] = field(default_factory=list)
    combos: List[Combo] = field(default_factory=list)
    results_title: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "QuizConfig":
        return cls(
            questions=[Question.from_dict(q) for q in _array(raw, 'questions') if isinstance(q, dict)],
            rules=[Rule.from_dict(r) for r in _array(raw, 'rules') if isinstance(r, dict)],
            combos=[Combo.from_dict(c) for c in _array(raw, 'combos') if isinstance(c, dict)],
            results_title=raw.get('resultsTitle'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'questions': [q.to_dict() for q in self.questions],
            'rules': [r.to_dict() for r in self.rules],
            'combos': [c.to_dict() for c in self.combos],
        }
        if self.results_title is not None:
            data['resultsTitle'] = self.results_title
        return data


@dataclass
class ProductSummary:
    handle: str
    title: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None  # major units, e.g. "24.00"
    currency: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        return self.title is None and self.image is None and self.price is None

    @property
    def display_title(self) -> str:
        return self.title or self.handle.replace('-', ' ')

    def to_dict(self):
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class RecommendationOutcome:
    """What a finished wizard shows: products, an empty state, or an error."""
    products: List[ProductSummary] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def is_empty(self) -> bool:
        return not self.failed and not self.products

# END OF FILE: quizlite/domain/models.py
