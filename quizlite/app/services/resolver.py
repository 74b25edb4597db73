# START OF FILE: quizlite/app/services/resolver.py
"""
Answer -> product handle matching.

Two explicit phases:
  1. every combo (AND over its `when` mapping) is checked in config order and
     all matching combos contribute their handles;
  2. only when no combo matched at all, every single-condition rule is checked
     and all matching rules contribute.

A combo that matches with an empty `recommend` list still counts as a match
and suppresses the rule phase.
"""

from typing import Iterable, List, Tuple

from quizlite.domain.answers import AnswerMap
from quizlite.domain.models import Combo, QuizConfig, Rule
from quizlite.shared.logger import logger


class OrderedHandleSet:
    """Deduplicating handle collector that keeps first-seen order."""

    def __init__(self):
        self._handles = {}

    def extend(self, handles: Iterable[str]) -> None:
        for handle in handles:
            self._handles.setdefault(handle, None)

    def __len__(self) -> int:
        return len(self._handles)

    def to_list(self) -> List[str]:
        return list(self._handles)


def combo_matches(combo: Combo, answers: AnswerMap) -> bool:
    return all(answers.matches(key, expected) for key, expected in combo.when.items())


def rule_matches(rule: Rule, answers: AnswerMap) -> bool:
    return answers.matches(rule.question_id, rule.value)


def _match_combos(answers: AnswerMap, combos: List[Combo]) -> Tuple[bool, OrderedHandleSet]:
    picks = OrderedHandleSet()
    matched = False
    for combo in combos:
        if combo_matches(combo, answers):
            matched = True
            picks.extend(combo.recommend)
    return matched, picks


def _match_rules(answers: AnswerMap, rules: List[Rule]) -> OrderedHandleSet:
    picks = OrderedHandleSet()
    for rule in rules:
        if rule_matches(rule, answers):
            picks.extend(rule.recommend)
    return picks


def resolve(answers: AnswerMap, config: QuizConfig) -> List[str]:
    matched, picks = _match_combos(answers, config.combos)
    if matched:
        logger.info(f"Combo phase matched; {len(picks)} handle(s) recommended, rules skipped.")
        return picks.to_list()

    picks = _match_rules(answers, config.rules)
    logger.info(f"No combo matched; rule fallback recommended {len(picks)} handle(s).")
    return picks.to_list()

# END OF FILE: quizlite/app/services/resolver.py
