"""
Tests for the quiz wizard: step layouts, Next gating and submission.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest

from quizlite.app.wizard.layouts import slugify
from quizlite.app.wizard.session import QuizWizard, WizardState
from quizlite.domain.errors import ConfigError, WizardError
from quizlite.domain.models import ProductSummary, QuizConfig


def make_wizard(*questions, **extra) -> QuizWizard:
    return QuizWizard(QuizConfig.from_dict({"questions": list(questions), "rules": [], **extra}))


def radio_question(qid="finish", qtype="single", layout="default"):
    return {
        "id": qid,
        "title": qid.title(),
        "layout": layout,
        "type": qtype,
        "options": [{"value": "a", "label": "A"}, {"value": "b", "label": "B"}, {"value": "c", "label": "C"}],
    }


TONE_FACES = {
    "id": "tonefaces",
    "title": "Tone",
    "layout": "tone-faces",
    "stops": ["Light", "Light Medium", "Deep"],
    "options": [
        {"value": "f1", "label": "F1", "group": 0},
        {"value": "f2", "label": "F2", "group": 1},
        {"value": "f3", "label": "F3", "group": 1},
        {"value": "f4", "label": "F4", "group": 2},
    ],
}

SLIDER = {
    "id": "coverage",
    "title": "Coverage",
    "layout": "slider",
    "stops": ["Sheer", "Medium", "Full"],
    "options": [{"value": 1, "label": "Sheer"}, {"value": 2, "label": "Medium"}, {"value": 3, "label": "Full"}],
}


class TestNavigation:
    def test_linear_steps_then_submitting(self):
        wizard = make_wizard(radio_question("q1"), radio_question("q2"))
        assert wizard.can_go_back is False
        assert wizard.next() is WizardState.STEP
        assert wizard.step == 1 and wizard.is_last_step
        assert wizard.next() is WizardState.SUBMITTING
        assert wizard.current_question is None
        assert wizard.can_go_next is False

    def test_previous_unavailable_at_first_step(self):
        wizard = make_wizard(radio_question("q1"))
        with pytest.raises(WizardError):
            wizard.previous()

    def test_previous_goes_back(self):
        wizard = make_wizard(radio_question("q1"), radio_question("q2"))
        wizard.next()
        assert wizard.previous() is WizardState.STEP
        assert wizard.step == 0

    def test_interactions_rejected_after_last_step(self):
        wizard = make_wizard(radio_question("q1"))
        wizard.next()
        with pytest.raises(WizardError):
            wizard.choose(0)
        with pytest.raises(WizardError):
            wizard.next()

    def test_option_index_out_of_range(self):
        wizard = make_wizard(radio_question("q1"))
        with pytest.raises(WizardError):
            wizard.choose(7)

    def test_empty_quiz_goes_straight_to_submitting(self):
        wizard = make_wizard()
        assert wizard.view() is None
        assert wizard.next() is WizardState.SUBMITTING
        with pytest.raises(WizardError):
            wizard.choose(0)

    def test_view_reports_progress(self):
        wizard = make_wizard(radio_question("q1"), radio_question("q2"))
        wizard.next()
        view = wizard.view()
        assert (view.step, view.total, view.question_id) == (1, 2, "q2")


class TestDefaultLayout:
    def test_single_select_replaces_and_is_skippable(self):
        wizard = make_wizard(radio_question())
        assert wizard.can_go_next
        wizard.choose(0)
        wizard.choose(1)
        assert wizard.answers.to_dict() == {"finish": "b"}
        assert [o.selected for o in wizard.view().options] == [False, True, False]

    def test_multi_select_toggles(self):
        wizard = make_wizard(radio_question("concerns", qtype="multi"))
        wizard.choose(0)
        wizard.choose(2)
        wizard.choose(0)
        assert wizard.answers.to_dict() == {"concerns": ["c"]}
        view = wizard.view()
        assert view.multi is True
        assert [o.selected for o in view.options] == [False, False, True]

    def test_restoring_does_not_duplicate(self):
        wizard = make_wizard(radio_question("concerns", qtype="multi"), radio_question("q2"))
        wizard.choose(1)
        wizard.next()
        wizard.previous()
        assert wizard.answers.to_dict() == {"concerns": ["b"]}
        assert [o.selected for o in wizard.view().options] == [False, True, False]


class TestImageGridLayout:
    def test_requires_a_choice(self):
        wizard = make_wizard(radio_question(layout="image-grid", qtype="multi"))
        assert wizard.can_go_next is False
        with pytest.raises(WizardError):
            wizard.next()
        wizard.choose(2)
        assert wizard.can_go_next is True

    def test_new_choice_deselects_previous(self):
        wizard = make_wizard(radio_question(layout="image-grid", qtype="multi"))
        wizard.choose(0)
        wizard.choose(1)
        assert wizard.answers.to_dict() == {"finish": "b"}
        assert [o.selected for o in wizard.view().options] == [False, True, False]


class TestSliderLayout:
    def test_entering_commits_first_option(self):
        wizard = make_wizard(SLIDER)
        assert wizard.answers.to_dict() == {"coverage": "1"}
        assert wizard.can_go_next is True
        assert wizard.view().slider_index == 0

    def test_every_move_commits(self):
        wizard = make_wizard(SLIDER)
        wizard.move_slider(2)
        assert wizard.answers.to_dict() == {"coverage": "3"}
        wizard.move_slider(1)
        assert wizard.answers.to_dict() == {"coverage": "2"}

    def test_revisit_restores_saved_position(self):
        wizard = make_wizard(SLIDER, radio_question("q2"))
        wizard.move_slider(2)
        wizard.next()
        wizard.previous()
        assert wizard.view().slider_index == 2
        assert wizard.answers.to_dict() == {"coverage": "3"}

    def test_out_of_range_move(self):
        wizard = make_wizard(SLIDER)
        with pytest.raises(WizardError):
            wizard.move_slider(3)

    def test_slider_rejected_on_radio_layout(self):
        wizard = make_wizard(radio_question())
        with pytest.raises(WizardError):
            wizard.move_slider(1)


class TestToneFacesLayout:
    def test_tone_is_slug_of_stop_label(self):
        wizard = make_wizard(TONE_FACES)
        assert wizard.answers.to_dict() == {"tone": "tone_light"}
        wizard.move_slider(1)
        assert wizard.answers.scalar("tone") == "tone_light_medium"

    def test_next_requires_tone_and_face(self):
        wizard = make_wizard(TONE_FACES)
        assert wizard.can_go_next is False
        wizard.choose(0)
        assert wizard.can_go_next is True
        assert wizard.answers.to_dict() == {"tone": "tone_light", "face": "f1"}

    def test_choosing_face_moves_slider_to_its_group(self):
        wizard = make_wizard(TONE_FACES)
        wizard.choose(3)
        assert wizard.answers.to_dict() == {"tone": "tone_deep", "face": "f4"}
        view = wizard.view()
        assert view.slider_index == 2
        assert [o.dimmed for o in view.options] == [True, True, True, False]

    def test_moving_slider_away_clears_face(self):
        wizard = make_wizard(TONE_FACES)
        wizard.choose(1)  # f2, group 1
        wizard.move_slider(2)
        assert "face" not in wizard.answers
        assert wizard.answers.scalar("tone") == "tone_deep"
        assert wizard.can_go_next is False
        wizard.choose(3)
        assert wizard.can_go_next is True

    def test_moving_slider_within_group_keeps_face(self):
        wizard = make_wizard(TONE_FACES)
        wizard.choose(2)  # f3, group 1
        wizard.move_slider(1)
        assert wizard.answers.scalar("face") == "f3"

    def test_revisit_restores_tone_and_face(self):
        wizard = make_wizard(TONE_FACES, radio_question("q2"))
        wizard.choose(1)
        wizard.next()
        wizard.previous()
        view = wizard.view()
        assert view.slider_index == 1
        assert [o.selected for o in view.options] == [False, True, False, False]
        assert wizard.answers.to_dict() == {"tone": "tone_light_medium", "face": "f2"}

    def test_out_of_range_position(self):
        wizard = make_wizard(TONE_FACES)
        with pytest.raises(WizardError):
            wizard.move_slider(5)


class TestUndertoneLayout:
    def test_stores_under_undertone_key_and_is_skippable(self):
        question = {**radio_question("skin_undertone", layout="undertone")}
        wizard = make_wizard(question)
        assert wizard.can_go_next is True
        wizard.choose(1)
        wizard.choose(2)
        assert wizard.answers.to_dict() == {"undertone": "c"}
        assert [o.selected for o in wizard.view().options] == [False, False, True]


class TestSubmit:
    def test_submit_produces_results(self):
        wizard = make_wizard(radio_question())
        wizard.choose(0)
        wizard.next()
        recommender = AsyncMock()
        recommender.recommend.return_value = [ProductSummary(handle="shade-a")]

        outcome = asyncio.run(wizard.submit(recommender))

        assert wizard.state is WizardState.RESULTS
        assert [p.handle for p in outcome.products] == ["shade-a"]
        recommender.recommend.assert_awaited_once_with(wizard.answers, wizard.config)

    def test_empty_result_is_not_failure(self):
        wizard = make_wizard(radio_question())
        wizard.next()
        recommender = AsyncMock()
        recommender.recommend.return_value = []
        outcome = asyncio.run(wizard.submit(recommender))
        assert outcome.is_empty and not outcome.failed

    def test_failure_still_reaches_results(self):
        wizard = make_wizard(radio_question())
        wizard.next()
        recommender = AsyncMock()
        recommender.recommend.side_effect = ConfigError("gone")
        outcome = asyncio.run(wizard.submit(recommender))
        assert wizard.state is WizardState.RESULTS
        assert outcome.failed and not outcome.is_empty

    def test_submit_before_last_step_is_rejected(self):
        wizard = make_wizard(radio_question())
        with pytest.raises(WizardError):
            asyncio.run(wizard.submit(AsyncMock()))

    def test_results_title_default(self):
        assert make_wizard(radio_question()).results_title == "Your best shade matches"
        assert make_wizard(radio_question(), resultsTitle="Picks").results_title == "Picks"


def test_full_scenario_combo_wins(scenario_config, store, fake_catalog_factory):
    from quizlite.app.services.materializer import ResultMaterializer
    from quizlite.app.services.recommendation_service import RecommendationService

    wizard = QuizWizard(scenario_config)
    wizard.choose(0)  # face f1, group 0 -> tone_light
    wizard.next()
    wizard.choose(0)  # warm
    assert wizard.next() is WizardState.SUBMITTING

    catalog = fake_catalog_factory(products={"shade-a": ProductSummary(handle="shade-a", title="Shade A")})
    service = RecommendationService(store, ResultMaterializer(catalog))
    outcome = asyncio.run(wizard.submit(service))

    assert wizard.answers.to_dict() == {"tone": "tone_light", "face": "f1", "undertone": "warm"}
    assert [p.to_dict() for p in outcome.products] == [{"handle": "shade-a", "title": "Shade A"}]


@pytest.mark.parametrize("label, slug", [("Light", "light"), ("Light Medium", "light_medium"), (" Deep/Rich ", "deep_rich")])
def test_slugify(label, slug):
    assert slugify(label) == slug
