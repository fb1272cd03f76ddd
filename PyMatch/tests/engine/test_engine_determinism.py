"""Results do not depend on input order or on the execution strategy."""

import random

import pytest

from PyMatch.matching import (
    AttributeValueComparator,
    LinearCombinationMatchingRule,
    MatchingEngine,
    NoBlocker,
    StandardBlocker,
    TopKVotesAggregator,
    VotingAggregator,
    VotingMatchingRule,
)
from PyMatch.model import Attribute, Correspondence, Dataset, Record
from PyMatch.processing import ParallelExecution

NAMES = [
    "anna", "anne", "annie", "ben", "bert", "bart", "carl", "karl", "carla", "dora",
    "doro", "emil", "emily", "emile", "fritz", "frida", "greta", "gretel", "hans", "hanna",
    "hannah", "ida", "ina", "jan", "jana", "jann", "kurt", "kira", "lena", "lene",
]


def shuffled(items, seed):
    items = list(items)
    random.Random(seed).shuffle(items)
    return items


def summary(correspondences):
    return [(c.key, c.score) for c in correspondences]


def engines():
    return [
        MatchingEngine(),
        MatchingEngine(ParallelExecution(max_workers=4, chunk_size=1)),
        MatchingEngine(ParallelExecution(max_workers=2, chunk_size=3)),
    ]


@pytest.fixture
def person_records():
    return [Record(f"p{i:02d}", "people", {"name": name}) for i, name in enumerate(NAMES)]


@pytest.fixture
def indexed_movies_df(movies_df):
    df = movies_df.copy()
    df["_id"] = [f"m{i}" for i in range(len(df))]
    df.attrs["dataset_name"] = "movies"
    return df


@pytest.fixture
def indexed_films_df(films_df):
    df = films_df.copy()
    df["_id"] = [f"f{i}" for i in range(len(df))]
    df.attrs["dataset_name"] = "films"
    return df


def shuffled_frame(df, seed):
    result = df.iloc[shuffled(range(len(df)), seed)].reset_index(drop=True)
    result.attrs["dataset_name"] = df.attrs["dataset_name"]
    return result


class TestDeterminism:
    """Shuffled inputs and parallel execution give identical results."""

    def test_duplicate_detection(self, person_records):
        rule = LinearCombinationMatchingRule(0.7)
        rule.add_comparator(AttributeValueComparator("name", "levenshtein"), 1.0)
        blocker = StandardBlocker(blocking_key=lambda r: r.get("name")[0])

        expected = summary(
            MatchingEngine().run_duplicate_detection(Dataset(person_records, name="people"), True, rule, blocker)
        )
        assert expected

        for seed in range(3):
            dataset = Dataset(shuffled(person_records, seed), name="people")
            for engine in engines():
                result = engine.run_duplicate_detection(dataset, True, rule, blocker)
                assert summary(result) == expected

    def test_instance_based_schema_matching(self, indexed_movies_df, indexed_films_df):
        expected = summary(
            MatchingEngine().run_instance_based_schema_matching(
                Dataset.from_dataframe(indexed_movies_df), Dataset.from_dataframe(indexed_films_df)
            )
        )
        assert expected

        for seed in range(3):
            movies = Dataset.from_dataframe(shuffled_frame(indexed_movies_df, seed))
            films = Dataset.from_dataframe(shuffled_frame(indexed_films_df, seed + 10))
            for engine in engines():
                result = engine.run_instance_based_schema_matching(movies, films)
                assert summary(result) == expected

    def test_duplicate_based_schema_matching(self, indexed_movies_df, indexed_films_df):
        """Vote filtering keeps the same votes whatever the order of duplicates."""
        movies = Dataset.from_dataframe(indexed_movies_df)
        films = Dataset.from_dataframe(indexed_films_df)
        duplicates = [
            Correspondence(movies.get("m0"), films.get("f0"), 1.0),
            Correspondence(movies.get("m1"), films.get("f1"), 1.0),
        ]

        def run(engine, instance_correspondences):
            return engine.run_duplicate_based_schema_matching(
                indexed_movies_df,
                indexed_films_df,
                instance_correspondences,
                VotingMatchingRule(),
                TopKVotesAggregator(1),
                VotingAggregator(),
            )

        expected = summary(run(MatchingEngine(), duplicates))
        assert expected

        for seed in range(3):
            for engine in engines():
                assert summary(run(engine, shuffled(duplicates, seed))) == expected

    def test_identity_resolution_with_competing_schema_correspondences(self):
        """The order of schema correspondences for the same attribute does not matter."""
        dataset_a = Dataset([Record("a1", "a", {"title": "Heat"})], name="a")
        dataset_b = Dataset([Record("b1", "b", {"name": "Heat", "alt": "Ronin"})], name="b")
        title = Attribute("a.title", "title", "a")
        schema_correspondences = [
            Correspondence(title, Attribute("b.name", "name", "b"), 0.9),
            Correspondence(title, Attribute("b.alt", "alt", "b"), 0.4),
        ]
        rule = LinearCombinationMatchingRule(0.9)
        rule.add_comparator(AttributeValueComparator("title"), 1.0)

        for order in (schema_correspondences, list(reversed(schema_correspondences))):
            for engine in engines():
                result = engine.run_identity_resolution(dataset_a, dataset_b, order, rule, NoBlocker())
                assert summary(result) == [(("a1", "b1"), 1.0)]
