"""Tests for the MatchingEngine pipelines."""

import pytest

from PyMatch.matching import (
    AttributeValueComparator,
    InstanceBasedSchemaBlocker,
    LabelComparator,
    LinearCombinationMatchingRule,
    MatchingEngine,
    NoBlocker,
    NoSchemaBlocker,
    StandardBlocker,
    TopKVotesAggregator,
    ValueBasedBlocker,
    VotingAggregator,
    VotingMatchingRule,
)
from PyMatch.model import Attribute, Correspondence, Dataset


def keys(correspondences):
    return {c.key for c in correspondences}


@pytest.fixture
def engine():
    return MatchingEngine()


@pytest.fixture
def title_rule():
    rule = LinearCombinationMatchingRule(0.9)
    rule.add_comparator(AttributeValueComparator("title"), 1.0)
    return rule


class TestDuplicateDetection:
    """Test within-dataset matching."""

    def test_symmetric_is_canonical_subset(self, engine, people):
        """Symmetric mode yields exactly the pairs with first_id < second_id."""
        rule = LinearCombinationMatchingRule(0.0)
        rule.add_comparator(AttributeValueComparator("name", "levenshtein"), 1.0)

        full = engine.run_duplicate_detection(people, False, rule, NoBlocker())
        symmetric = engine.run_duplicate_detection(people, True, rule, NoBlocker())

        assert len(full) == 12
        assert keys(symmetric) == {k for k in keys(full) if k[0] < k[1]}
        assert all(c.first_id != c.second_id for c in full + symmetric)

    def test_finds_duplicates(self, engine, people):
        rule = LinearCombinationMatchingRule(1.0)
        rule.add_comparator(AttributeValueComparator("name", "levenshtein"), 1.0)

        result = engine.run_duplicate_detection(people, True, rule, StandardBlocker(blocking_key=lambda r: r.get("name")[0]))

        assert keys(result) == {("p3", "p4")}

    def test_requires_single_dataset_blocker(self, engine, people, title_rule):
        with pytest.raises(TypeError):
            engine.run_duplicate_detection(people, True, title_rule, InstanceBasedSchemaBlocker())


class TestIdentityResolution:
    """Test cross-dataset matching with schema correspondences."""

    def test_schema_correspondences_guide_comparators(self, engine, movies, films, title_rule):
        schema_correspondences = [
            Correspondence(
                Attribute("movies.title", "title", "movies"),
                Attribute("films.film_name", "film_name", "films"),
                1.0,
                provenance=(Correspondence("x", "y"),),
            )
        ]

        result = engine.run_identity_resolution(movies, films, schema_correspondences, title_rule, NoBlocker())

        assert keys(result) == {("movies_000000", "films_000000"), ("movies_000001", "films_000001")}
        assert all(c.score >= 0.9 for c in result)

    def test_without_schema_correspondences(self, engine, movies, films, title_rule):
        """Without a schema mapping the title comparator is undefined for every pair."""
        assert engine.run_identity_resolution(movies, films, None, title_rule, NoBlocker()) == []

    def test_simple_identity_resolution(self, engine, movies, films):
        """Records are matched by the number of shared values."""
        result = engine.run_simple_identity_resolution(
            movies, films, ValueBasedBlocker(), VotingAggregator(min_votes=2)
        )

        assert [(c.key, c.score) for c in result] == [
            (("movies_000000", "films_000000"), 3.0),
            (("movies_000001", "films_000001"), 2.0),
        ]


class TestSchemaMatching:
    """Test the schema matching pipelines."""

    def test_label_based_example(self, engine, label_schemas):
        """Labels equal up to case match; 'label' matches nothing."""
        schema1, schema2 = label_schemas

        result = engine.run_label_based_schema_matching(schema1, schema2, LabelComparator("levenshtein"), 0.8)

        assert ("s1.name", "s2.Name") in keys(result)
        assert ("s1.title", "s2.Title") in keys(result)
        assert keys(result) == {("s1.name", "s2.Name"), ("s1.Name", "s2.Name"), ("s1.title", "s2.Title")}
        assert all("label" not in c.first_id + c.second_id for c in result)
        assert all(c.score >= 0.8 for c in result)

    def test_label_based_with_dataframes(self, engine, movies_df):
        other = movies_df.rename(columns={"title": "Title", "director": "directed_by"})
        other.attrs["dataset_name"] = "other"

        result = engine.run_label_based_schema_matching(movies_df, other, LabelComparator(), 1.0)

        assert keys(result) == {("movies.title", "other.Title"), ("movies.year", "other.year")}

    def test_generic_schema_matching(self, engine, label_schemas):
        schema1, schema2 = label_schemas
        rule = LinearCombinationMatchingRule(1.0).add_comparator(LabelComparator(), 1.0)

        result = engine.run_schema_matching(schema1, schema2, None, rule, NoSchemaBlocker())

        assert len(result) == 3

    def test_instance_based(self, engine, movies, films):
        """Attributes sharing values are matched by vote count."""
        result = engine.run_instance_based_schema_matching(movies, films, aggregator=VotingAggregator(min_votes=2))

        assert [(c.key, c.score) for c in result] == [
            (("movies.title", "films.film_name"), 2.0),
            (("movies.year", "films.release_year"), 2.0),
        ]

    def test_duplicate_based(self, engine, movies_df, films_df, duplicates):
        """Known duplicates vote for attribute pairs with agreeing values."""
        result = engine.run_duplicate_based_schema_matching(
            movies_df,
            films_df,
            duplicates,
            VotingMatchingRule(),
            None,
            VotingAggregator(min_votes=2, normalization=len(duplicates)),
        )

        assert [(c.key, c.score) for c in result] == [
            (("movies.title", "films.film_name"), 1.0),
            (("movies.year", "films.release_year"), 1.0),
        ]
        assert all(len(c.provenance) == 2 for c in result)

    def test_duplicate_based_vote_filter(self, engine, movies_df, films_df, duplicates):
        """With k=1 each duplicate pair casts a single vote."""
        result = engine.run_duplicate_based_schema_matching(
            movies_df,
            films_df,
            duplicates,
            VotingMatchingRule(),
            TopKVotesAggregator(1),
            VotingAggregator(),
            NoSchemaBlocker(),
        )

        assert sum(len(c.provenance) for c in result) == len(duplicates)
        assert keys(result) == {
            ("movies.director", "films.director_name"),
            ("movies.title", "films.film_name"),
        }

    def test_duplicate_based_requires_voting_rule(self, engine, movies_df, films_df, duplicates, title_rule):
        with pytest.raises(TypeError, match="VotingMatchingRule"):
            engine.run_duplicate_based_schema_matching(
                movies_df, films_df, duplicates, title_rule, None, VotingAggregator()
            )

    def test_invalid_schema(self, engine):
        with pytest.raises(TypeError, match="Expected a Dataset or DataFrame"):
            engine.run_label_based_schema_matching(["a"], ["b"], LabelComparator(), 0.5)


class TestTopK:
    """Test the top-k post-filters."""

    @pytest.fixture
    def corrs(self):
        return [
            Correspondence("a", "x", 0.9),
            Correspondence("a", "z", 0.8),
            Correspondence("a", "y", 0.8),
            Correspondence("b", "x", 0.5),
            Correspondence("b", "y", 0.3),
        ]

    def test_instance_top_k(self, engine, corrs):
        result = engine.get_top_k_instance_correspondences(corrs, 2, 0.4)
        assert [(c.key, c.score) for c in result] == [
            (("a", "x"), 0.9),
            (("a", "y"), 0.8),
            (("b", "x"), 0.5),
        ]

    def test_schema_top_k(self, engine, corrs):
        """Schema and instance correspondences use the same selection."""
        assert engine.get_top_k_schema_correspondences(corrs, 1, 0.0) == engine.get_top_k_instance_correspondences(corrs, 1, 0.0)
        assert keys(engine.get_top_k_schema_correspondences(corrs, 1, 0.0)) == {("a", "x"), ("b", "x")}

    def test_invalid_k(self, engine, corrs):
        with pytest.raises(ValueError, match="k must be a positive integer"):
            engine.get_top_k_instance_correspondences(corrs, 0, 0.0)
