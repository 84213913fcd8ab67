"""
Slang resolver: maps informal abbreviations ("idk", "tbh", "no cap") to their long form.
Only one meaning is returned per utterance.
"""
import re
from typing import Optional

from companion.preprocess.tables import PreprocessorTables, SlangEntry

_NON_LETTERS = re.compile(r"[^a-zA-Z]")


class SlangResolver:
    def __init__(self, tables: PreprocessorTables):
        self._single = {entry.term: entry for entry in tables.slang if not entry.is_multi_word}
        self._multi = tuple(entry for entry in tables.slang if entry.is_multi_word)

    def resolve_entry(self, text: str) -> Optional[SlangEntry]:
        """
        Token scan first (first token with an exact match wins), then a containment scan
        over multi-word terms in table order.
        """
        for token in text.split():
            word = _NON_LETTERS.sub("", token).lower()
            if word in self._single:
                return self._single[word]
        lowered = text.lower()
        for entry in self._multi:
            if entry.term in lowered:
                return entry
        return None

    def resolve(self, text: str) -> Optional[str]:
        entry = self.resolve_entry(text)
        return entry.meaning if entry else None

    def contains_slang(self, text: str) -> bool:
        return self.resolve_entry(text) is not None
