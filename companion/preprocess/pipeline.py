"""
Preprocessing pipeline: normalize -> typo-correct -> slang, implicit meaning, context,
classification and disambiguation, all read from the corrected text.
"""
import logging
from typing import Optional

from companion.models.api_models import ProcessingResult
from companion.preprocess.classifier import InputClassifier
from companion.preprocess.context import ContextInferrer
from companion.preprocess.disambiguation import DisambiguationEngine
from companion.preprocess.implicit import ImplicitMeaningExtractor
from companion.preprocess.normalizer import TypoCorrector, normalize_text
from companion.preprocess.slang import SlangResolver
from companion.preprocess.tables import PreprocessorTables, default_tables, load_tables

logger = logging.getLogger(__name__)


class Preprocessor:
    """
    Holds one stage object per step, all sharing the same immutable tables.
    process() keeps no state between calls, so one instance can serve every request.
    """

    def __init__(self, tables: Optional[PreprocessorTables] = None):
        self.tables = tables if tables is not None else default_tables()
        self.corrector = TypoCorrector(self.tables)
        self.slang = SlangResolver(self.tables)
        self.implicit = ImplicitMeaningExtractor(self.tables)
        self.context = ContextInferrer(self.tables)
        self.classifier = InputClassifier(self.tables)
        self.disambiguation = DisambiguationEngine(self.tables)

    def process(self, text: Optional[str]) -> ProcessingResult:
        normalized = normalize_text(text)
        if not normalized:
            return ProcessingResult(processed_input="")

        corrected, changed = self.corrector.correct(normalized)
        result = ProcessingResult(processed_input=corrected)
        if changed and corrected != normalized:
            result.corrected_typo = corrected

        result.slang_meaning = self.slang.resolve(corrected)
        result.implicit_meaning, result.emotional_undertone = self.implicit.extract_with_undertone(corrected)
        result.inferred_context, result.context_confidence = self.context.infer(corrected)
        result.classifications = self.classifier.classify(corrected)
        result.needs_clarification, result.clarification_question = self.disambiguation.check(corrected)

        logger.debug(
            f"[Preprocess] '{corrected[:80]}' context={result.inferred_context} "
            f"conf={result.context_confidence:.2f} implicit={result.implicit_meaning} "
            f"slang={result.slang_meaning} clarify={result.needs_clarification}"
        )
        return result

    # ─── Convenience checks ──────────────────────────────────────────────────

    def contains_slang(self, text: str) -> bool:
        return self.slang.contains_slang(normalize_text(text))

    def has_typo(self, text: str) -> bool:
        normalized = normalize_text(text)
        return self.corrector.correct(normalized)[1]

    def get_context(self, text: str) -> str:
        return self.context.infer(normalize_text(text))[0]

    def needs_clarification(self, text: str) -> bool:
        return self.process(text).needs_clarification

    def clarification_options(self, keyword: str):
        return self.disambiguation.clarification_options(keyword)

    def generate_follow_up(self, text: str) -> Optional[str]:
        """
        Clarification question when one is needed, else a follow-up keyed by the implicit
        meaning, else by the inferred context. None when nothing applies.
        """
        result = self.process(text)
        if result.needs_clarification:
            return result.clarification_question
        if result.implicit_meaning and result.implicit_meaning in self.tables.follow_ups_by_meaning:
            return self.tables.follow_ups_by_meaning[result.implicit_meaning]
        return self.tables.follow_ups_by_context.get(result.inferred_context)


# Default instance, built from COMPANION_TABLES_PATH (or the built-in tables) on first use
_preprocessor = None


def set_preprocessor(preprocessor: Optional[Preprocessor]) -> None:
    global _preprocessor
    _preprocessor = preprocessor


def get_preprocessor() -> Preprocessor:
    global _preprocessor
    if _preprocessor is None:
        _preprocessor = Preprocessor(load_tables())
    return _preprocessor


def process(text: Optional[str]) -> ProcessingResult:
    return get_preprocessor().process(text)
