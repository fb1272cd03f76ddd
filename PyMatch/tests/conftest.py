"""Shared fixtures for PyMatch tests."""

import pandas as pd
import pytest

from PyMatch.model import Attribute, Correspondence, Dataset, Record


@pytest.fixture
def movies_df():
    """Create a sample movies dataset."""
    data = {
        "title": ["The Matrix", "Inception", "Pulp Fiction"],
        "year": [1999, 2010, 1994],
        "director": ["Lana Wachowski", "Christopher Nolan", "Quentin Tarantino"],
    }
    df = pd.DataFrame(data)
    df.attrs["dataset_name"] = "movies"
    return df


@pytest.fixture
def films_df():
    """Create a sample films dataset with a different schema."""
    data = {
        "film_name": ["The Matrix", "Inception", "Heat"],
        "release_year": [1999, 2010, 1995],
        "director_name": ["Lana Wachowski", "Nolan", "Michael Mann"],
    }
    df = pd.DataFrame(data)
    df.attrs["dataset_name"] = "films"
    return df


@pytest.fixture
def movies(movies_df):
    return Dataset.from_dataframe(movies_df)


@pytest.fixture
def films(films_df):
    return Dataset.from_dataframe(films_df)


@pytest.fixture
def duplicates(movies, films):
    """Known duplicates between movies and films."""
    return [
        Correspondence(movies.get("movies_000000"), films.get("films_000000"), 1.0),
        Correspondence(movies.get("movies_000001"), films.get("films_000001"), 1.0),
    ]


@pytest.fixture
def people():
    """Small person dataset with one missing city."""
    records = [
        Record("p1", "people", {"name": "anna", "city": "berlin"}),
        Record("p2", "people", {"name": "anne", "city": "berlin"}),
        Record("p3", "people", {"name": "bob", "city": "hamburg"}),
        Record("p4", "people", {"name": "bob", "city": None}),
    ]
    return Dataset(records, name="people")


@pytest.fixture
def label_schemas():
    """Two schemas with labels differing in case."""
    schema1 = Dataset(
        [
            Attribute("s1.name", "name", "s1"),
            Attribute("s1.Name", "Name", "s1"),
            Attribute("s1.title", "title", "s1"),
        ],
        name="s1",
    )
    schema2 = Dataset(
        [
            Attribute("s2.Name", "Name", "s2"),
            Attribute("s2.label", "label", "s2"),
            Attribute("s2.Title", "Title", "s2"),
        ],
        name="s2",
    )
    return schema1, schema2
