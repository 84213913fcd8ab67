from typing import Optional, Tuple

from companion.preprocess.tables import PreprocessorTables


class ImplicitMeaningExtractor:
    """First matching rule in declaration order wins; rules are never re-ranked."""

    def __init__(self, tables: PreprocessorTables):
        self._rules = tables.implicit_rules

    def extract_with_undertone(self, text: str) -> Tuple[Optional[str], Optional[str]]:
        for rule in self._rules:
            if rule.matches(text):
                return (rule.meaning, rule.undertone)
        return (None, None)

    def extract(self, text: str) -> Optional[str]:
        return self.extract_with_undertone(text)[0]
