# START OF FILE: quizlite/app/wizard/session.py

from enum import Enum
from typing import Optional

from quizlite.app.services.recommendation_service import RecommendationService
from quizlite.app.wizard.layouts import StepLayout, StepView, layout_for
from quizlite.domain.answers import AnswerMap
from quizlite.domain.errors import WizardError
from quizlite.domain.models import Question, QuizConfig, RecommendationOutcome
from quizlite.shared.config import DEFAULT_RESULTS_TITLE
from quizlite.shared.logger import logger


class WizardState(str, Enum):
    STEP = "step"
    SUBMITTING = "submitting"
    RESULTS = "results"


class QuizWizard:
    """
    One user's pass through the quiz. Steps are strictly linear; the only
    thing answers influence is whether Next is enabled on the current step.
    """

    def __init__(self, config: QuizConfig):
        self.config = config
        self.answers = AnswerMap()
        self.step = 0
        self.state = WizardState.STEP
        self.outcome: Optional[RecommendationOutcome] = None
        self._enter_step()

    # --- read-only state ---

    @property
    def question_count(self) -> int:
        return len(self.config.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.state is WizardState.STEP and self.step < self.question_count:
            return self.config.questions[self.step]
        return None

    @property
    def layout(self) -> Optional[StepLayout]:
        question = self.current_question
        return layout_for(question) if question else None

    @property
    def is_last_step(self) -> bool:
        return self.step >= self.question_count - 1

    @property
    def can_go_back(self) -> bool:
        return self.state is WizardState.STEP and self.step > 0

    @property
    def can_go_next(self) -> bool:
        if self.state is not WizardState.STEP:
            return False
        question = self.current_question
        return question is None or self.layout.is_valid(question, self.answers)

    @property
    def results_title(self) -> str:
        return self.config.results_title or DEFAULT_RESULTS_TITLE

    def view(self) -> Optional[StepView]:
        question = self.current_question
        if question is None:
            return None
        view = self.layout.render(question, self.answers)
        view.step = self.step
        view.total = self.question_count
        return view

    # --- interactions ---

    def choose(self, option_index: int) -> None:
        question = self._require_question()
        if not 0 <= option_index < len(question.options):
            raise WizardError(f"Option {option_index} does not exist on '{question.id}'.")
        self.layout.choose(question, self.answers, question.options[option_index])

    def move_slider(self, index: int) -> None:
        question = self._require_question()
        self.layout.slide(question, self.answers, index)

    def next(self) -> WizardState:
        self._require_step()
        if not self.can_go_next:
            raise WizardError("The current step needs an answer before continuing.")
        if not self.is_last_step:
            self.step += 1
            self._enter_step()
        else:
            self.state = WizardState.SUBMITTING
        return self.state

    def previous(self) -> WizardState:
        self._require_step()
        if self.step == 0:
            raise WizardError("Already at the first step.")
        self.step -= 1
        self._enter_step()
        return self.state

    async def submit(self, recommender: RecommendationService) -> RecommendationOutcome:
        """Runs the recommendation pipeline. Always ends in RESULTS, with products, an empty list or an error."""
        if self.state is not WizardState.SUBMITTING:
            raise WizardError("Submit is only possible after the last step.")
        try:
            products = await recommender.recommend(self.answers, self.config)
            self.outcome = RecommendationOutcome(products=products)
        except Exception as e:
            logger.error(f"Wizard submission failed for answers {self.answers!r}: {e}", exc_info=True)
            self.outcome = RecommendationOutcome(error="Recommendation failed")
        self.state = WizardState.RESULTS
        return self.outcome

    # --- helpers ---

    def _enter_step(self) -> None:
        question = self.current_question
        if question is not None:
            self.layout.enter(question, self.answers)

    def _require_step(self) -> None:
        if self.state is not WizardState.STEP:
            raise WizardError(f"The quiz is already {self.state.value}.")

    def _require_question(self) -> Question:
        self._require_step()
        question = self.current_question
        if question is None:
            raise WizardError("This quiz has no questions.")
        return question

# END OF FILE: quizlite/app/wizard/session.py
