"""
Utterance normalizer. Run once before every other preprocessing stage.
Lowercases and trims the raw text, then corrects typos token by token: first from the
direct correction table, then by nearest edit distance over the correction keys and the
common-word pool.
"""
import logging
import re
from typing import NamedTuple, Optional, Tuple

from companion.preprocess.distance import closest_candidate, is_transposition
from companion.preprocess.tables import PreprocessorTables

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NON_LETTERS = re.compile(r"[^a-zA-Z]")
# leading punctuation, word body, trailing punctuation
_TOKEN_PARTS = re.compile(r"^([^a-zA-Z]*)(.*?)([^a-zA-Z]*)$", re.DOTALL)

SOURCE_CORRECTION = "correction"
SOURCE_COMMON = "common"


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, trim and collapse whitespace. Blank input becomes ""."""
    if not text or not text.strip():
        return ""
    return _WHITESPACE.sub(" ", text.lower()).strip()


class Candidate(NamedTuple):
    match: str
    replacement: str
    source: str


class TypoCorrector:
    """
    Per-token typo correction over one merged candidate list.
    Correction-table keys come first so they win distance ties against common words.
    """

    def __init__(self, tables: PreprocessorTables):
        self.tables = tables
        self._corrections = tables.corrections
        self._candidates: Tuple[Candidate, ...] = tuple(
            [Candidate(wrong, right, SOURCE_CORRECTION) for wrong, right in tables.corrections.items()]
            + [Candidate(word, word, SOURCE_COMMON) for word in tables.common_words]
        )
        # Words that are already correct and must never be rewritten
        known = set(tables.common_words)
        known.update(tables.corrections.values())
        known.update(entry.term for entry in tables.slang if not entry.is_multi_word)
        self._known = frozenset(known)
        self._longest = max((len(c.match) for c in self._candidates), default=0)

    def allowed_distance(self, word: str) -> int:
        if len(word) < self.tables.min_fuzzy_length:
            return 0
        if len(word) <= self.tables.short_word_length:
            return min(1, self.tables.max_edit_distance)
        return self.tables.max_edit_distance

    def lookup(self, word: str) -> Optional[str]:
        """Return the replacement for a clean lowercase word, or None to keep it."""
        if word in self._corrections:
            return self._corrections[word]
        if word in self._known:
            return None
        budget = self.allowed_distance(word)
        if budget <= 0 or len(word) > self._longest + budget:
            return None
        found = closest_candidate(word, self._candidates, budget)
        if found is None and budget < self.tables.max_edit_distance:
            found = self._transposed(word)
        if found is None:
            return None
        candidate, distance = found
        logger.debug(f"[Typo] '{word}' -> '{candidate.replacement}' ({candidate.source}, distance={distance})")
        return candidate.replacement

    def _transposed(self, word: str) -> Optional[Tuple[Candidate, int]]:
        """Swapped adjacent letters cost two edits but are allowed on shorter words."""
        for candidate in self._candidates:
            if is_transposition(word, candidate.match):
                return (candidate, 2)
        return None

    def correct_token(self, token: str) -> str:
        lead, body, trail = _TOKEN_PARTS.match(token).groups()
        clean = _NON_LETTERS.sub("", body).lower()
        if not clean:
            return token
        replacement = self.lookup(clean)
        if replacement is None or replacement == clean:
            return token
        return f"{lead}{replacement}{trail}"

    def correct(self, text: str) -> Tuple[str, bool]:
        """Returns (corrected_text, changed). Tokens are rejoined with single spaces."""
        changed = False
        out = []
        for token in text.split():
            fixed = self.correct_token(token)
            if fixed != token:
                changed = True
            out.append(fixed)
        return " ".join(out), changed
