"""Tests for VotingMatchingRule."""

import pytest

from PyMatch.matching.blocking import CandidatePair
from PyMatch.matching.rules import VotingMatchingRule
from PyMatch.model import Attribute, Correspondence, Record


@pytest.fixture
def attributes():
    return Attribute("a.title", "title", "a"), Attribute("b.name", "name", "b")


@pytest.fixture
def instance_correspondence():
    return Correspondence(
        Record("a1", "a", {"title": "The Matrix", "year": "0"}),
        Record("b1", "b", {"name": "the matrix", "year": "0"}),
        1.0,
    )


class TestVotingMatchingRuleInit:
    """Test configuration of the voting rule."""

    def test_initialization_default(self):
        rule = VotingMatchingRule()
        assert rule.threshold == 1.0
        assert rule.value_comparison == "exact"
        assert rule.ignore_zero_values is True

    def test_unsupported_value_comparison(self):
        with pytest.raises(ValueError, match="Unsupported value comparison"):
            VotingMatchingRule(value_comparison="invalid_method")

    def test_fuzzy_requires_similarity_function(self):
        with pytest.raises(ValueError, match="similarity_function must be specified"):
            VotingMatchingRule(value_comparison="fuzzy")

    def test_unknown_similarity_function(self):
        with pytest.raises(ValueError, match="Unknown similarity function"):
            VotingMatchingRule(value_comparison="fuzzy", similarity_function="invalid_function")


class TestValueComparison:
    """Test value normalisation and comparison."""

    def test_normalize_value_basic(self):
        rule = VotingMatchingRule()
        assert rule._normalize_value("  Hello World  ") == "hello world"
        assert rule._normalize_value(123) == "123"
        assert rule._normalize_value(None) == ""

    def test_exact(self):
        rule = VotingMatchingRule()
        assert rule.compare_values("Heat", "heat") == 1.0
        assert rule.compare_values("Heat!", "heat") == 0.0

    def test_integral_float_equals_int(self):
        """A year from a pandas column widened by NaN still agrees with the integer."""
        rule = VotingMatchingRule()
        assert rule.compare_values(1999.0, 1999) == 1.0
        assert rule.compare_values(1999.5, 1999) == 0.0

    def test_normalized(self):
        rule = VotingMatchingRule(value_comparison="normalized")
        assert rule.compare_values("Hello,   World!", "hello world") == 1.0

    def test_zero_values_ignored(self):
        rule = VotingMatchingRule()
        assert rule.compare_values("0", "0") == 0.0
        assert rule.compare_values(None, None) == 0.0
        assert VotingMatchingRule(ignore_zero_values=False).compare_values("0", "0") == 1.0

    def test_fuzzy(self):
        rule = VotingMatchingRule(threshold=0.7, value_comparison="fuzzy", similarity_function="levenshtein")
        assert rule.compare_values("heat", "heal") == pytest.approx(0.75)


class TestVoting:
    """Test vote generation."""

    def test_agreeing_values_cast_vote(self, attributes, instance_correspondence):
        """A vote links the attributes and is caused by the instance correspondence."""
        vote = VotingMatchingRule().apply(*attributes, instance_correspondence)

        assert vote.key == ("a.title", "b.name")
        assert vote.score == 1.0
        assert vote.provenance == (instance_correspondence,)

    def test_disagreeing_values_do_not_vote(self, instance_correspondence):
        attr1 = Attribute("a.year", "year", "a")
        attr2 = Attribute("b.name", "name", "b")
        assert VotingMatchingRule().apply(attr1, attr2, instance_correspondence) is None

    def test_zero_values_do_not_vote(self, instance_correspondence):
        attr1 = Attribute("a.year", "year", "a")
        attr2 = Attribute("b.year", "year", "b")
        assert VotingMatchingRule().apply(attr1, attr2, instance_correspondence) is None

    def test_inverted_instance_correspondence(self, attributes, instance_correspondence):
        """Instance correspondences pointing the other way are aligned with the schemas."""
        inverted = instance_correspondence.invert()
        vote = VotingMatchingRule().apply(*attributes, inverted)
        assert vote is not None
        assert vote.provenance == (inverted,)

    def test_fuzzy_vote_scored_by_similarity(self, attributes):
        corr = Correspondence(
            Record("a1", "a", {"title": "heat"}), Record("b1", "b", {"name": "heal"})
        )
        rule = VotingMatchingRule(threshold=0.7, value_comparison="fuzzy", similarity_function="levenshtein")
        assert rule.apply(*attributes, corr).score == pytest.approx(0.75)

        strict = VotingMatchingRule(threshold=0.8, value_comparison="fuzzy", similarity_function="levenshtein")
        assert strict.apply(*attributes, corr) is None

    def test_evaluate_votes_per_instance_correspondence(self, attributes, instance_correspondence):
        """One vote per agreeing instance correspondence among the causes."""
        other = Correspondence(
            Record("a2", "a", {"title": "Heat"}), Record("b2", "b", {"name": "Alien"})
        )
        third = Correspondence(
            Record("a3", "a", {"title": "Alien"}), Record("b3", "b", {"name": "alien"})
        )
        candidate = CandidatePair(*attributes, (instance_correspondence, other, third))

        votes = list(VotingMatchingRule().evaluate(candidate))

        assert len(votes) == 2
        assert [v.provenance[0].key for v in votes] == [("a1", "b1"), ("a3", "b3")]
