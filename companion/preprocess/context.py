"""
Rule-based context inferrer. Picks the conversational situation ("work_stress",
"social_isolation", ...) that downstream response selection keys on.
"""
from typing import Tuple

from companion.preprocess.tables import PreprocessorTables


class ContextInferrer:
    """
    Every rule is evaluated; the matching rule with the strictly highest confidence wins,
    so on a tie the earlier rule in the table keeps the label.
    infer() returns (label, confidence), or (default_context, 0.0) when nothing matches.
    """

    def __init__(self, tables: PreprocessorTables):
        self._rules = tables.context_rules
        self._default = tables.default_context

    def infer(self, text: str) -> Tuple[str, float]:
        best_label = self._default
        best_confidence = 0.0
        for rule in self._rules:
            if rule.confidence > best_confidence and rule.matches(text):
                best_confidence = rule.confidence
                best_label = rule.label
        return (best_label, best_confidence)
