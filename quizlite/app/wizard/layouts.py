# START OF FILE: quizlite/app/wizard/layouts.py
"""
Step layouts for the quiz wizard.

Every layout works only on the question and the AnswerMap it is handed; no
layout keeps state of its own, so re-entering a step rebuilds the same view
from the answers alone.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from quizlite.domain.answers import AnswerMap, FACE_KEY, TONE_KEY, UNDERTONE_KEY
from quizlite.domain.errors import WizardError
from quizlite.domain.models import Layout, Option, Question


@dataclass
class OptionView:
    index: int
    value: str
    label: str
    selected: bool = False
    dimmed: bool = False
    image: Optional[str] = None
    color: Optional[str] = None
    desc: Optional[str] = None


@dataclass
class StepView:
    question_id: str
    layout: Layout
    title: str
    subtitle: Optional[str]
    options: List[OptionView]
    multi: bool = False
    stops: List[str] = field(default_factory=list)
    slider_index: Optional[int] = None
    valid: bool = True
    step: int = 0
    total: int = 0


def slugify(label: str) -> str:
    return re.sub(r'[^a-z0-9]+', '_', label.lower()).strip('_')


class StepLayout:
    layout = Layout.DEFAULT

    def enter(self, question: Question, answers: AnswerMap) -> None:
        """Called whenever the step becomes current. Commits implicit defaults."""

    def render(self, question: Question, answers: AnswerMap) -> StepView:
        selected = set(self.selected_values(question, answers))
        return StepView(
            question_id=question.id,
            layout=self.layout,
            title=question.title,
            subtitle=question.subtitle,
            options=[self._option_view(i, opt, opt.key in selected) for i, opt in enumerate(question.options)],
            valid=self.is_valid(question, answers),
        )

    def selected_values(self, question: Question, answers: AnswerMap):
        return answers.values(question.id)

    def choose(self, question: Question, answers: AnswerMap, option: Option) -> None:
        raise NotImplementedError

    def slide(self, question: Question, answers: AnswerMap, index: int) -> None:
        raise WizardError(f"Layout '{self.layout.value}' has no slider.")

    def is_valid(self, question: Question, answers: AnswerMap) -> bool:
        return True

    @staticmethod
    def _option_view(index: int, option: Option, selected: bool, dimmed: bool = False) -> OptionView:
        return OptionView(
            index=index,
            value=option.key,
            label=option.label,
            selected=selected,
            dimmed=dimmed,
            image=option.image,
            color=option.color,
            desc=option.desc,
        )


class DefaultLayout(StepLayout):
    """Radios, or checkboxes for type=multi. Skippable."""
    layout = Layout.DEFAULT

    def render(self, question, answers):
        view = super().render(question, answers)
        view.multi = question.is_multi
        return view

    def choose(self, question, answers, option):
        if question.is_multi:
            answers.toggle(question.id, option.value)
        else:
            answers.set_scalar(question.id, option.value)


class ImageGridLayout(StepLayout):
    """Picture tiles; exactly one must be picked, whatever the declared type."""
    layout = Layout.IMAGE_GRID

    def choose(self, question, answers, option):
        answers.set_scalar(question.id, option.value)

    def is_valid(self, question, answers):
        return answers.has(question.id)


class SliderLayout(StepLayout):
    """Ordered ticks; the handle always sits on an option, so the step always has an answer."""
    layout = Layout.SLIDER

    def position(self, question: Question, answers: AnswerMap) -> int:
        saved = answers.scalar(question.id)
        for i, option in enumerate(question.options):
            if option.key == saved:
                return i
        return 0

    def enter(self, question, answers):
        if question.options:
            answers.set_scalar(question.id, question.options[self.position(question, answers)].value)

    def render(self, question, answers):
        view = super().render(question, answers)
        view.stops = question.stops or [o.label for o in question.options]
        view.slider_index = self.position(question, answers)
        return view

    def slide(self, question, answers, index):
        if not 0 <= index < len(question.options):
            raise WizardError(f"Slider position {index} is out of range for '{question.id}'.")
        answers.set_scalar(question.id, question.options[index].value)

    def choose(self, question, answers, option):
        answers.set_scalar(question.id, option.value)


class ToneFacesLayout(StepLayout):
    """
    Tone slider plus face tiles, answered under the synthetic keys `tone` and
    `face`. A selected face must always belong to the slider's tone group.
    """
    layout = Layout.TONE_FACES

    def positions(self, question: Question) -> int:
        highest_group = max((o.group_index for o in question.options), default=0)
        return max(len(question.stops), highest_group + 1, 1)

    def tone_for(self, question: Question, index: int) -> str:
        label = question.stops[index] if index < len(question.stops) else str(index)
        return f"tone_{slugify(label)}"

    def position(self, question: Question, answers: AnswerMap) -> int:
        saved_tone = answers.scalar(TONE_KEY)
        if saved_tone is not None:
            for i in range(self.positions(question)):
                if self.tone_for(question, i) == saved_tone:
                    return i
        face = self._selected_face(question, answers)
        return face.group_index if face else 0

    def enter(self, question, answers):
        answers.set_scalar(TONE_KEY, self.tone_for(question, self.position(question, answers)))

    def render(self, question, answers):
        index = self.position(question, answers)
        face = answers.scalar(FACE_KEY)
        return StepView(
            question_id=question.id,
            layout=self.layout,
            title=question.title,
            subtitle=question.subtitle,
            options=[
                self._option_view(i, opt, opt.key == face, dimmed=opt.group_index != index)
                for i, opt in enumerate(question.options)
            ],
            stops=list(question.stops),
            slider_index=index,
            valid=self.is_valid(question, answers),
        )

    def slide(self, question, answers, index):
        if not 0 <= index < self.positions(question):
            raise WizardError(f"Tone position {index} is out of range for '{question.id}'.")
        answers.set_scalar(TONE_KEY, self.tone_for(question, index))
        face = answers.scalar(FACE_KEY)
        if face is not None and not any(
            o.key == face and o.group_index == index for o in question.options
        ):
            answers.clear(FACE_KEY)

    def choose(self, question, answers, option):
        # picking a face moves the slider to that face's group
        answers.set_scalar(TONE_KEY, self.tone_for(question, option.group_index))
        answers.set_scalar(FACE_KEY, option.value)

    def is_valid(self, question, answers):
        return answers.has(TONE_KEY) and answers.has(FACE_KEY)

    @staticmethod
    def _selected_face(question: Question, answers: AnswerMap) -> Optional[Option]:
        face = answers.scalar(FACE_KEY)
        return next((o for o in question.options if o.key == face), None)


class UndertoneLayout(StepLayout):
    """Colour cards answered under `undertone`. Skippable."""
    layout = Layout.UNDERTONE

    def selected_values(self, question, answers):
        return answers.values(UNDERTONE_KEY)

    def choose(self, question, answers, option):
        answers.set_scalar(UNDERTONE_KEY, option.value)


LAYOUTS: Dict[Layout, StepLayout] = {
    layout.layout: layout
    for layout in (DefaultLayout(), ImageGridLayout(), SliderLayout(), ToneFacesLayout(), UndertoneLayout())
}


def layout_for(question: Question) -> StepLayout:
    return LAYOUTS.get(question.layout, LAYOUTS[Layout.DEFAULT])

# END OF FILE: quizlite/app/wizard/layouts.py
