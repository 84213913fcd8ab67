"""
Cue-based input classifier over three independent axes: literal vs figurative,
serious vs playful, direct vs indirect. Each axis is an ordered cue table with a default,
so every utterance gets exactly one label per axis.
Confidences are fixed per rule; they are heuristics, not calibrated probabilities.
"""
from typing import List, Tuple

from companion.models.api_models import Classification, InputAxis
from companion.preprocess.tables import ClassificationAxis, PreprocessorTables


class InputClassifier:
    """
    Axes are evaluated in InputAxis order. Within an axis the first cue rule whose pattern
    is found decides (label, confidence); with no cue the axis default applies.
    """

    def __init__(self, tables: PreprocessorTables):
        self._axes: Tuple[ClassificationAxis, ...] = tables.axes

    @staticmethod
    def classify_axis(axis: ClassificationAxis, text: str) -> Tuple[str, float]:
        for rule in axis.rules:
            if rule.matches(text):
                return (rule.label, rule.confidence)
        return (axis.default_label, axis.default_confidence)

    def classify(self, text: str) -> List[Classification]:
        results = []
        for axis in self._axes:
            label, confidence = self.classify_axis(axis, text)
            results.append(Classification(axis=axis.axis, label=label, confidence=confidence))
        return results

    def label_for(self, text: str, axis_id: InputAxis) -> str:
        for axis in self._axes:
            if axis.axis == axis_id:
                return self.classify_axis(axis, text)[0]
        raise KeyError(axis_id)
