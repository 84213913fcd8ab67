"""
Rule tables for the utterance preprocessor.

Defaults are plain module constants. build_tables() freezes them, optionally overlaid
with a JSON file, into one validated PreprocessorTables object that every stage reads.
Patterns are compiled here, once; a bad table raises ConfigurationError before any
utterance is processed.
"""
import json
import logging
import os
import re
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from companion.models.api_models import InputAxis

logger = logging.getLogger(__name__)

# Typo tolerance. Words shorter than MIN_FUZZY_LENGTH are never fuzzily corrected,
# words up to SHORT_WORD_LENGTH letters tolerate one edit, longer words MAX_EDIT_DISTANCE.
MAX_EDIT_DISTANCE = 2
MIN_FUZZY_LENGTH = 5
SHORT_WORD_LENGTH = 7

# Inputs with at most this many tokens get the short-input clarification checks
SHORT_INPUT_MAX_TOKENS = 2

DEFAULT_CONTEXT = "general"
CLARIFICATION_PREFIX = "I want to make sure I understand. "
GENERIC_CLARIFICATION = "Could you tell me more about what you mean?"


class ConfigurationError(Exception):
    """Raised when rule tables cannot be built. Fatal at startup."""


# ─── Typo Correction ─────────────────────────────────────────────────────────

CORRECTIONS: Dict[str, str] = {
    "thier": "their",
    "teh": "the",
    "recieve": "receive",
    "occured": "occurred",
    "definately": "definitely",
    "seperate": "separate",
    "accomodate": "accommodate",
    "untill": "until",
    "begining": "beginning",
    "beleive": "believe",
    "calender": "calendar",
    "concensus": "consensus",
    "embarass": "embarrass",
    "enviroment": "environment",
    "goverment": "government",
    "independant": "independent",
    "knowlege": "knowledge",
    "neccessary": "necessary",
    "occassion": "occasion",
    "priviledge": "privilege",
    "recomend": "recommend",
    "refered": "referred",
    "tommorow": "tomorrow",
    "tommorrow": "tomorrow",
    "truely": "truly",
    "writting": "writing",
}

# Order matters: among pool words at the same distance the earlier one wins.
COMMON_WORDS: Tuple[str, ...] = (
    "the", "be", "to", "of", "and", "a", "in", "that", "have", "i",
    "it", "for", "not", "on", "with", "he", "as", "you", "do", "at",
    "this", "but", "his", "by", "from", "they", "we", "say", "her", "she",
    "or", "an", "will", "my", "one", "all", "would", "there", "their", "what",
    "so", "up", "out", "if", "about", "who", "get", "which", "go", "me",
    "when", "make", "can", "like", "time", "no", "just", "him", "know", "take",
    "people", "into", "year", "your", "good", "some", "could", "them", "see", "other",
    "than", "then", "now", "look", "only", "come", "its", "over", "think", "also",
    "back", "after", "use", "two", "how", "our", "work", "first", "well", "way",
    "even", "new", "want", "because", "any", "these", "give", "day", "most", "us",
    "feeling", "really", "thing", "things", "something", "everything", "nothing",
    "overwhelmed", "overwhelming", "stressed", "tired", "happy", "sad", "excited",
    "help", "need", "understand", "feel", "feels",
    # conversational vocabulary the rule tables depend on
    "hello", "hi", "hey", "thanks", "thank", "okay", "ok", "yes", "yeah", "sure",
    "maybe", "perhaps", "please", "sorry", "fine", "nice", "life", "love", "mood",
    "lonely", "alone", "nobody", "down", "blue", "depressed", "exhausted", "sleepy",
    "drained", "pressure", "deadline", "awesome", "great", "assist", "support",
    "homework", "assignment", "study", "exam", "school", "game", "games", "gaming",
    "play", "story", "write", "creative", "poem", "coding", "code", "whatever",
    "matter", "care", "guess", "suppose", "very", "kind", "sort", "literally",
    "actually", "joking", "kidding", "funny", "wondering", "tell", "show", "wish",
    "today", "friend", "friends", "family", "job", "much", "more", "been", "am",
    "is", "are", "was", "were", "had", "has", "did", "does", "done", "doing",
    "going", "lately", "right", "still", "never", "always", "why", "where",
    "alright", "anything", "someone", "stress", "talk", "said", "mean",
    "those", "while", "every", "again", "should", "might", "being",
    "hate", "hard", "cold", "week", "worse", "worst", "here", "home", "hurt",
    "angry", "scared", "worried", "anxious", "upset", "bored", "falling", "apart",
    "sleep", "eat", "cry", "crying", "happen", "happened", "better", "tonight",
    # contractions typed without the apostrophe
    "cant", "dont", "wont", "didnt", "doesnt", "isnt", "wasnt", "arent", "havent",
    "couldnt", "wouldnt", "shouldnt", "thats", "whats", "youre", "theyre", "ive",
    "im",
)


# ─── Slang ───────────────────────────────────────────────────────────────────

SLANG: Tuple[Tuple[str, str, str], ...] = (
    ("wyd", "what are you doing", "inquiry"),
    ("wdym", "what do you mean", "confusion"),
    ("idk", "I don't know", "response"),
    ("btw", "by the way", "transition"),
    ("imo", "in my opinion", "opinion"),
    ("imho", "in my humble opinion", "opinion"),
    ("tbh", "to be honest", "honesty"),
    ("ngl", "not going to lie", "honesty"),
    ("hbu", "how about you", "inquiry"),
    ("wbu", "what about you", "inquiry"),
    ("rn", "right now", "time"),
    ("irl", "in real life", "contrast"),
    ("np", "no problem", "response"),
    ("ty", "thank you", "gratitude"),
    ("tysm", "thank you so much", "gratitude"),
    ("yw", "you're welcome", "response"),
    ("brb", "be right back", "absence"),
    ("bff", "best friend forever", "relationship"),
    ("fyi", "for your information", "information"),
    ("smh", "shaking my head", "disapproval"),
    ("lol", "laughing out loud", "amusement"),
    ("lmao", "laughing my ass off", "amusement"),
    ("omg", "oh my god", "surprise"),
    ("fr", "for real", "emphasis"),
    ("asap", "as soon as possible", "urgency"),
    ("no cap", "no lie", "honesty"),
    ("low key", "secretly or slightly", "hedge"),
    ("hits different", "feels unusually good", "emphasis"),
)


# ─── Context Inference ───────────────────────────────────────────────────────

# (pattern, label, confidence). Highest confidence wins, earlier rule on a tie.
CONTEXT_RULES: Tuple[Tuple[str, str, float], ...] = (
    (r"overwhelmed|overwhelming|too much", "emotional_stress", 0.9),
    (r"tired|exhausted|sleepy|drained", "physical_exhaustion", 0.85),
    (r"lonely|alone|no one|nobody", "social_isolation", 0.9),
    (r"stressed|pressure|deadline", "work_stress", 0.8),
    (r"happy|excited|awesome|great", "positive_emotion", 0.85),
    (r"\bsad\b|\bdown\b|\bblue\b|depressed", "negative_emotion", 0.9),
    (r"help|assist|support", "seeking_help", 0.85),
    (r"homework|assignment|\bstudy|\bexams?\b", "academic", 0.9),
    (r"\bgames?\b|gaming|\bplay|fortnite|minecraft", "gaming", 0.85),
    (r"\bwrit(?:e|ing)\b|\bstor(?:y|ies)\b|creative|\bpoems?\b", "creative_writing", 0.85),
)


# ─── Implicit Meaning ────────────────────────────────────────────────────────

# (pattern, meaning, undertone). Declaration order is priority order.
IMPLICIT_RULES: Tuple[Tuple[str, str, str], ...] = (
    (r"\bfine\b|\bokay\b|\balright\b", "dismissive_response_possible", "neutral_dismissive"),
    (r"whatever|doesn'?t matter|not care|don'?t care", "deflection_avoidance", "frustrated"),
    (r"\bjust\b|\bonly\b|\bmerely\b", "minimizing_feelings", "downplaying"),
    (r"\bguess\b|\bsuppose\b|\bspose\b", "uncertain_hesitant", "uncertain"),
    (r"\bsuppose\b|\bguess\b|think so", "uncertain_response", "doubtful"),
    (r"\blife\b|everything|nothing", "existential_context", "contemplative"),
    (r"\breally\b|\bso\b|\bvery\b", "intensifier_present", "emphasizing"),
    (r"kind of|sort of|\bmaybe\b|\bperhaps\b", "hedging_language", "uncertain"),
)


# ─── Input Classification ────────────────────────────────────────────────────

FIGURATIVE_CUES: Tuple[str, ...] = (
    r"\bliterally\b",
    r"\bactually\b",
    r"\breally\b",
    r"\blike an? ",
    r"so much",
)

# "serious", "sigh" and "honestly" mark a serious tone and are not playful cues.
# "really" is only a figurative cue.
PLAYFUL_CUES: Tuple[str, ...] = (
    r"joking|kidding|sarcas",
    r"\blol\b|\blmao\b|haha|funny|\bjk\b",
)

# Hedging is checked before direct requests: "maybe you could..." reads as indirect.
INDIRECT_CUES = r"\bmaybe\b|\bperhaps\b|i was wondering|do you think"
DIRECT_CUES = r"please|can you|could you|would you|tell me|show me|help me|\bi need\b|\bi want\b"

CLASSIFICATION_AXES: Tuple[Dict[str, Any], ...] = (
    {
        "axis": InputAxis.LITERAL_FIGURATIVE,
        "rules": [{"pattern": p, "label": "figurative", "confidence": 0.7} for p in FIGURATIVE_CUES],
        "default_label": "literal",
        "default_confidence": 0.8,
    },
    {
        "axis": InputAxis.SERIOUS_PLAYFUL,
        "rules": [{"pattern": p, "label": "playful", "confidence": 0.75} for p in PLAYFUL_CUES],
        "default_label": "serious",
        "default_confidence": 0.7,
    },
    {
        "axis": InputAxis.DIRECT_INDIRECT,
        "rules": [
            {"pattern": INDIRECT_CUES, "label": "indirect", "confidence": 0.7},
            {"pattern": DIRECT_CUES, "label": "direct", "confidence": 0.7},
        ],
        "default_label": "direct",
        "default_confidence": 0.7,
    },
)


# ─── Clarification ───────────────────────────────────────────────────────────

# Listed in trigger priority order. `question` is the hand-authored phrasing;
# entries without one fall back to GENERIC_CLARIFICATION.
CLARIFICATIONS: Tuple[Dict[str, Any], ...] = (
    {
        "trigger": "overwhelmed",
        "question": "Are you feeling overwhelmed by work, relationships, or life in general?",
        "options": [
            ("work", "Is it work or school that's overwhelming you?"),
            ("relationships", "Is it related to relationships or social situations?"),
            ("life", "Is it overall life stress or something specific?"),
            ("emotions", "Are you feeling overwhelmed by your emotions?"),
        ],
    },
    {
        "trigger": "fine",
        "question": "You said 'fine' - are you actually doing okay, or is there more going on?",
        "options": [
            ("truly_fine", "You seem okay, but are you sure everything's alright?"),
            ("dismissive", "You say fine, but I sense there might be more going on. Want to talk?"),
            ("hurrying", "Okay, is there something specific you need help with?"),
        ],
    },
    {
        "trigger": "nice",
        "question": "When you say 'nice,' do you mean that sincerely or is there something else?",
        "options": [
            ("sincere", "That's great to hear! What made it nice?"),
            ("sarcastic", "I'm sensing some uncertainty there. What's really on your mind?"),
            ("polite", "Alright, is there something else you'd like to discuss?"),
        ],
    },
    {
        "trigger": "help",
        "question": None,
        "options": [
            ("homework", "Are you looking for help with homework or studying?"),
            ("emotional", "Do you need emotional support or someone to talk to?"),
            ("technical", "Is there something technical you need help with?"),
            ("general", "How can I best help you today?"),
        ],
    },
    {
        "trigger": "coding",
        "question": None,
        "options": [
            ("learning", "Are you learning to code or working on a project?"),
            ("problem", "Do you have a specific coding problem you need help with?"),
            ("career", "Are you interested in programming as a career?"),
        ],
    },
    {
        "trigger": "just",
        "question": "I notice you said 'just' - are you downplaying what's really going on?",
        "options": [
            ("minimizing", "You say 'just' but I want to make sure I understand - is there more to this?"),
            ("literal", "Okay, just to clarify, what exactly do you mean by that?"),
            ("simple", "Got it. Is there anything else you'd like to add?"),
        ],
    },
    {
        "trigger": "life",
        "question": "When you mention life, are you talking about work, relationships, or something else?",
        "options": [
            ("general", "Life can be tough. What's been especially challenging lately?"),
            ("work", "Is it more work-related or personal life stuff?"),
            ("relationships", "Is it about relationships or something else?"),
            ("future", "Are you thinking about life goals or the future?"),
        ],
    },
)

# Checked only for very short inputs that no trigger matched.
SHORT_INPUT_CLARIFICATIONS: Tuple[Tuple[str, str], ...] = (
    (
        r"overwhelm",
        "I want to make sure I understand correctly. Are you feeling overwhelmed by "
        "something specific, or is it more general life stress?",
    ),
    (
        r"just life",
        "I'm here to listen. When you say 'just life,' what's been particularly "
        "challenging for you lately?",
    ),
    (
        r"wdym",
        "Could you help me understand what you mean? I'd like to make sure I respond appropriately.",
    ),
)


# ─── Follow-ups ──────────────────────────────────────────────────────────────

FOLLOW_UPS_BY_MEANING: Dict[str, str] = {
    "minimizing_feelings": "I notice you said 'just' - are you sure that's all that's going on? I'm here to listen if there's more.",
    "dismissive_response_possible": "You seem to be downplaying things. Are you actually doing okay?",
    "existential_context": "When you mention life being overwhelming, what's been the hardest part lately?",
}

FOLLOW_UPS_BY_CONTEXT: Dict[str, str] = {
    "emotional_stress": "You seem to be feeling overwhelmed. Would you like to talk about what's been most stressful?",
    "social_isolation": "It sounds like you might be feeling lonely. Would you like to chat about what's been going on?",
    "negative_emotion": "I'm here to listen. Would you like to share what's been making you feel this way?",
    "positive_emotion": "That's great to hear! What's been the highlight of your day?",
}


# ─── Validated Models ────────────────────────────────────────────────────────

def _compile(value):
    if isinstance(value, re.Pattern):
        return value
    try:
        return re.compile(value, re.IGNORECASE)
    except (re.error, TypeError) as e:
        raise ValueError(f"invalid pattern {value!r}: {e}")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PatternRule(_Frozen):
    pattern: re.Pattern

    @field_validator("pattern", mode="before")
    @classmethod
    def compile_pattern(cls, v):
        return _compile(v)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


class SlangEntry(_Frozen):
    term: str
    meaning: str
    category: str = "general"

    @field_validator("term")
    @classmethod
    def normalize_term(cls, v):
        v = " ".join(v.lower().split())
        if not v:
            raise ValueError("slang term must not be empty")
        return v

    @property
    def is_multi_word(self) -> bool:
        return " " in self.term


class ContextRule(PatternRule):
    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class ImplicitRule(PatternRule):
    meaning: str
    undertone: str


class CueRule(PatternRule):
    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class ClassificationAxis(_Frozen):
    axis: InputAxis
    rules: Tuple[CueRule, ...] = ()
    default_label: str
    default_confidence: float = Field(ge=0.0, le=1.0)


class ClarificationOption(_Frozen):
    option: str
    follow_up: str

    @classmethod
    def from_pair(cls, value):
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"option": value[0], "follow_up": value[1]}
        return value


class ClarificationEntry(_Frozen):
    trigger: str
    question: Optional[str] = None
    options: Tuple[ClarificationOption, ...] = Field(min_length=2, max_length=4)

    @field_validator("trigger")
    @classmethod
    def normalize_trigger(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError("clarification trigger must not be empty")
        return v

    @field_validator("options", mode="before")
    @classmethod
    def accept_pairs(cls, v):
        """Options may be given as [option, follow_up] pairs or as objects."""
        if isinstance(v, (list, tuple)):
            return [ClarificationOption.from_pair(item) for item in v]
        return v


class ShortInputRule(PatternRule):
    question: str


class PreprocessorTables(_Frozen):
    """Every table the pipeline reads. Immutable once validated."""
    model_config = ConfigDict(frozen=True, validate_default=True)

    corrections: Mapping[str, str]
    common_words: Tuple[str, ...]
    slang: Tuple[SlangEntry, ...] = ()
    context_rules: Tuple[ContextRule, ...] = ()
    implicit_rules: Tuple[ImplicitRule, ...] = ()
    axes: Tuple[ClassificationAxis, ...]
    clarifications: Tuple[ClarificationEntry, ...] = ()
    short_input_rules: Tuple[ShortInputRule, ...] = ()
    follow_ups_by_meaning: Mapping[str, str] = {}
    follow_ups_by_context: Mapping[str, str] = {}

    max_edit_distance: int = Field(MAX_EDIT_DISTANCE, ge=0)
    min_fuzzy_length: int = Field(MIN_FUZZY_LENGTH, ge=1)
    short_word_length: int = Field(SHORT_WORD_LENGTH, ge=1)
    short_input_max_tokens: int = Field(SHORT_INPUT_MAX_TOKENS, ge=0)
    default_context: str = DEFAULT_CONTEXT

    @field_validator("corrections")
    @classmethod
    def freeze_corrections(cls, v):
        cleaned = {}
        for wrong, right in v.items():
            wrong = wrong.strip().lower()
            right = right.strip().lower()
            if not wrong.isalpha() or not right:
                raise ValueError(f"correction keys must be single words: {wrong!r}")
            cleaned[wrong] = right
        return MappingProxyType(cleaned)

    @field_validator("follow_ups_by_meaning", "follow_ups_by_context")
    @classmethod
    def freeze_mapping(cls, v):
        return MappingProxyType(dict(v))

    @field_validator("common_words")
    @classmethod
    def dedupe_common_words(cls, v):
        seen = []
        for word in v:
            word = word.strip().lower()
            if word and word not in seen:
                seen.append(word)
        return tuple(seen)

    @field_validator("slang")
    @classmethod
    def unique_slang(cls, v):
        terms = [entry.term for entry in v]
        duplicates = sorted({t for t in terms if terms.count(t) > 1})
        if duplicates:
            raise ValueError(f"duplicate slang terms: {duplicates}")
        return v

    @field_validator("axes")
    @classmethod
    def one_table_per_axis(cls, v):
        by_axis = {item.axis: item for item in v}
        if len(v) != len(InputAxis) or set(by_axis) != set(InputAxis):
            raise ValueError(
                f"expected exactly one classification table per axis {[a.value for a in InputAxis]}"
            )
        # Results always list axes in declaration order
        return tuple(by_axis[axis] for axis in InputAxis)

    @field_validator("clarifications")
    @classmethod
    def unique_triggers(cls, v):
        triggers = [entry.trigger for entry in v]
        duplicates = sorted({t for t in triggers if triggers.count(t) > 1})
        if duplicates:
            raise ValueError(f"duplicate clarification triggers: {duplicates}")
        return v

    def clarification_for(self, keyword: str) -> Optional[ClarificationEntry]:
        keyword = (keyword or "").strip().lower()
        for entry in self.clarifications:
            if entry.trigger == keyword:
                return entry
        return None


# ─── Loading ─────────────────────────────────────────────────────────────────

def default_table_data() -> Dict[str, Any]:
    """Plain-data form of the built-in tables; the starting point for JSON overrides."""
    return {
        "corrections": dict(CORRECTIONS),
        "common_words": list(COMMON_WORDS),
        "slang": [{"term": t, "meaning": m, "category": c} for t, m, c in SLANG],
        "context_rules": [{"pattern": p, "label": l, "confidence": c} for p, l, c in CONTEXT_RULES],
        "implicit_rules": [{"pattern": p, "meaning": m, "undertone": u} for p, m, u in IMPLICIT_RULES],
        "axes": [dict(axis) for axis in CLASSIFICATION_AXES],
        "clarifications": [dict(entry) for entry in CLARIFICATIONS],
        "short_input_rules": [{"pattern": p, "question": q} for p, q in SHORT_INPUT_CLARIFICATIONS],
        "follow_ups_by_meaning": dict(FOLLOW_UPS_BY_MEANING),
        "follow_ups_by_context": dict(FOLLOW_UPS_BY_CONTEXT),
    }


def build_tables(overrides: Optional[Mapping[str, Any]] = None) -> PreprocessorTables:
    """Validate the default tables with any top-level overrides replacing whole tables."""
    data = default_table_data()
    if overrides:
        unknown = sorted(set(overrides) - set(PreprocessorTables.model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown table keys: {unknown}")
        data.update(overrides)
    try:
        tables = PreprocessorTables.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid preprocessor tables: {e}") from e
    logger.info(
        f"[Tables] Built: {len(tables.corrections)} corrections, {len(tables.common_words)} common words, "
        f"{len(tables.slang)} slang, {len(tables.context_rules)} context rules, "
        f"{len(tables.implicit_rules)} implicit rules, {len(tables.clarifications)} clarifications"
    )
    return tables


def load_tables(path: Optional[str] = None) -> PreprocessorTables:
    """Build tables from a JSON override file (COMPANION_TABLES_PATH when path is None)."""
    path = path or os.environ.get("COMPANION_TABLES_PATH")
    if not path:
        return build_tables()
    if not os.path.exists(path):
        raise ConfigurationError(f"Table file {path} not found.")
    with open(path, "r", encoding="utf-8") as f:
        try:
            overrides = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in table file {path}: {e}") from e
    if not isinstance(overrides, dict):
        raise ConfigurationError("Table file must contain a JSON object keyed by table name.")
    logger.info(f"[Tables] Loading overrides for {sorted(overrides)} from {path}")
    return build_tables(overrides)


_default_tables = None


def default_tables() -> PreprocessorTables:
    global _default_tables
    if _default_tables is None:
        _default_tables = build_tables()
    return _default_tables
