"""
Tests for the rule-driven stages: slang, implicit meaning, context and classification.
"""
import pytest

from companion.models.api_models import InputAxis
from companion.preprocess.classifier import InputClassifier
from companion.preprocess.context import ContextInferrer
from companion.preprocess.implicit import ImplicitMeaningExtractor
from companion.preprocess.slang import SlangResolver
from companion.preprocess.tables import build_tables


class TestSlangResolver:

    @pytest.fixture
    def resolver(self, tables):
        return SlangResolver(tables)

    def test_single_word(self, resolver):
        assert resolver.resolve("idk what to do") == "I don't know"

    def test_punctuation_is_stripped(self, resolver):
        assert resolver.resolve("tbh, it's a lot") == "to be honest"

    def test_first_token_wins(self, resolver):
        assert resolver.resolve("lol idk") == "laughing out loud"

    def test_multi_word(self, resolver):
        assert resolver.resolve("that movie was no cap amazing") == "no lie"

    def test_single_word_terms_do_not_match_inside_words(self, resolver):
        # "rn" is a slang term, "learn" is not slang
        assert resolver.resolve("i want to learn") is None

    def test_no_slang(self, resolver):
        assert resolver.resolve("hello there") is None
        assert resolver.contains_slang("hello there") is False
        assert resolver.contains_slang("brb") is True

    def test_entry_carries_category(self, resolver):
        entry = resolver.resolve_entry("ty so much")
        assert entry.term == "ty"
        assert entry.category == "gratitude"


class TestImplicitMeaningExtractor:

    @pytest.fixture
    def extractor(self, tables):
        return ImplicitMeaningExtractor(tables)

    def test_dismissive(self, extractor):
        assert extractor.extract_with_undertone("i'm fine") == ("dismissive_response_possible", "neutral_dismissive")

    def test_declaration_order_decides(self, extractor):
        # both "guess" and "fine" cues; the earlier rule wins
        assert extractor.extract("i guess it's fine") == "dismissive_response_possible"
        assert extractor.extract("i suppose so") == "uncertain_hesitant"

    def test_later_rule_reached(self, extractor):
        assert extractor.extract("i think so") == "uncertain_response"
        assert extractor.extract("kind of tired") == "hedging_language"

    def test_no_match(self, extractor):
        assert extractor.extract_with_undertone("hello") == (None, None)


class TestContextInferrer:

    @pytest.fixture
    def inferrer(self, tables):
        return ContextInferrer(tables)

    def test_work_stress(self, inferrer):
        assert inferrer.infer("i have a deadline and i'm stressed") == ("work_stress", 0.8)

    def test_highest_confidence_wins(self, inferrer):
        # academic (0.9) beats seeking_help (0.85)
        assert inferrer.infer("i need help with my homework") == ("academic", 0.9)

    def test_tie_goes_to_earlier_rule(self, inferrer):
        # social_isolation and negative_emotion are both 0.9
        assert inferrer.infer("i feel sad and lonely") == ("social_isolation", 0.9)

    def test_default(self, inferrer):
        assert inferrer.infer("hello") == ("general", 0.0)

    def test_tie_order_follows_table(self):
        tables = build_tables({"context_rules": [
            {"pattern": "rain", "label": "weather", "confidence": 0.5},
            {"pattern": "rain", "label": "mood", "confidence": 0.5},
            {"pattern": "umbrella", "label": "shopping", "confidence": 0.6},
        ]})
        inferrer = ContextInferrer(tables)
        assert inferrer.infer("rain again") == ("weather", 0.5)
        assert inferrer.infer("rain, need an umbrella") == ("shopping", 0.6)


class TestInputClassifier:

    @pytest.fixture
    def classifier(self, tables):
        return InputClassifier(tables)

    @staticmethod
    def _labels(results):
        return [(c.axis, c.label, c.confidence) for c in results]

    def test_defaults(self, classifier):
        assert self._labels(classifier.classify("hello")) == [
            (InputAxis.LITERAL_FIGURATIVE, "literal", 0.8),
            (InputAxis.SERIOUS_PLAYFUL, "serious", 0.7),
            (InputAxis.DIRECT_INDIRECT, "direct", 0.7),
        ]

    def test_exactly_one_label_per_axis(self, classifier):
        results = classifier.classify("maybe you could literally tell me a joke lol")
        assert [c.axis for c in results] == list(InputAxis)

    def test_figurative(self, classifier):
        assert classifier.label_for("this is literally the worst", InputAxis.LITERAL_FIGURATIVE) == "figurative"
        assert classifier.label_for("i love it so much", InputAxis.LITERAL_FIGURATIVE) == "figurative"

    def test_playful(self, classifier):
        results = classifier.classify("lol that's funny")
        assert results[1].label == "playful"
        assert results[1].confidence == 0.75

    def test_serious_words_are_not_playful(self, classifier):
        for text in ("i am really tired", "honestly i'm serious", "sigh"):
            assert classifier.label_for(text, InputAxis.SERIOUS_PLAYFUL) == "serious"
        assert classifier.label_for("i am really tired", InputAxis.LITERAL_FIGURATIVE) == "figurative"

    def test_hedging_beats_direct_request(self, classifier):
        assert classifier.label_for("maybe you could help me", InputAxis.DIRECT_INDIRECT) == "indirect"
        assert classifier.label_for("i was wondering about that", InputAxis.DIRECT_INDIRECT) == "indirect"

    def test_direct_request(self, classifier):
        assert classifier.label_for("can you tell me a joke", InputAxis.DIRECT_INDIRECT) == "direct"
        assert classifier.label_for("can you tell me a joke", InputAxis.SERIOUS_PLAYFUL) == "serious"
