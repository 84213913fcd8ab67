"""
Disambiguation engine. Decides whether an utterance is too ambiguous to answer directly
and, if so, which clarification question to ask.

Two passes:
1. Trigger scan: clarification triggers in priority order; the first trigger found as a
   substring produces a question and ends the check.
2. Short-input pass: only reached when no trigger matched and the utterance has at most
   `short_input_max_tokens` tokens. Special cases ("overwhelming", "wdym", ...) may ask
   their own question; otherwise needs_clarification is reset to False.
"""
import logging
from typing import List, Optional, Tuple

from companion.preprocess.tables import (
    CLARIFICATION_PREFIX,
    GENERIC_CLARIFICATION,
    ClarificationEntry,
    PreprocessorTables,
)

logger = logging.getLogger(__name__)


class DisambiguationEngine:
    def __init__(self, tables: PreprocessorTables):
        self.tables = tables
        self._entries = tables.clarifications
        self._short_rules = tables.short_input_rules
        self._short_max_tokens = tables.short_input_max_tokens

    @staticmethod
    def build_question(entry: ClarificationEntry) -> str:
        return CLARIFICATION_PREFIX + (entry.question or GENERIC_CLARIFICATION)

    def find_trigger(self, text: str) -> Optional[ClarificationEntry]:
        for entry in self._entries:
            if entry.trigger in text:
                return entry
        return None

    def check(self, text: str) -> Tuple[bool, Optional[str]]:
        """Returns (needs_clarification, clarification_question)."""
        entry = self.find_trigger(text)
        if entry is not None:
            logger.debug(f"[Clarify] trigger='{entry.trigger}'")
            return (True, self.build_question(entry))

        if len(text.split()) <= self._short_max_tokens:
            for rule in self._short_rules:
                if rule.matches(text):
                    logger.debug(f"[Clarify] short input matched '{rule.pattern.pattern}'")
                    return (True, rule.question)
        # No trigger and no short-input case: never ask, whatever the length
        return (False, None)

    def clarification_options(self, keyword: str) -> List[str]:
        """'option: follow-up' strings for a trigger keyword; [] when unknown."""
        entry = self.tables.clarification_for(keyword)
        if entry is None:
            return []
        return [f"{opt.option}: {opt.follow_up}" for opt in entry.options]
