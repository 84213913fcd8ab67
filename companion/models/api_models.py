from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class InputAxis(str, Enum):
    LITERAL_FIGURATIVE = "literal_figurative"
    SERIOUS_PLAYFUL = "serious_playful"
    DIRECT_INDIRECT = "direct_indirect"


# ─── Pipeline Result ─────────────────────────────────────────────────────────

class Classification(BaseModel):
    axis: InputAxis
    label: str
    confidence: float


class ProcessingResult(BaseModel):
    """One result per utterance. Built fresh on every call, never shared."""
    processed_input: str = ""
    corrected_typo: Optional[str] = None
    slang_meaning: Optional[str] = None
    implicit_meaning: Optional[str] = None
    emotional_undertone: Optional[str] = None
    inferred_context: str = "general"
    context_confidence: float = 0.0
    classifications: List[Classification] = []
    needs_clarification: bool = False
    clarification_question: Optional[str] = None

    def classification_for(self, axis: InputAxis) -> Optional[Classification]:
        for item in self.classifications:
            if item.axis == axis:
                return item
        return None


# ─── Preprocess API ──────────────────────────────────────────────────────────

class PreprocessRequest(BaseModel):
    text: str = Field("", max_length=4000)


class FollowUpResponse(BaseModel):
    follow_up: Optional[str] = None


class ClarificationOptionsResponse(BaseModel):
    keyword: str
    options: List[str] = []
