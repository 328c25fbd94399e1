"""Tests for the Query model."""

import pytest
from pydantic import ValidationError

from neograph_manager.models.query import Query


def test_of_string_without_parameters():
    query = Query.of("MATCH (n) RETURN n")

    assert query.text == "MATCH (n) RETURN n"
    assert query.parameters == {}


def test_of_query_returns_same_instance_without_parameters():
    query = Query(text="RETURN $x", parameters={"x": 1})

    assert Query.of(query) is query


def test_of_query_merges_explicit_parameters():
    query = Query(text="RETURN $x, $y", parameters={"x": 1, "y": 2})

    merged = Query.of(query, {"y": 3})

    assert merged.parameters == {"x": 1, "y": 3}
    assert query.parameters == {"x": 1, "y": 2}


@pytest.mark.parametrize("text", ["", "   \n"])
def test_blank_text_rejected(text):
    with pytest.raises(ValidationError):
        Query(text=text)


def test_query_is_immutable():
    query = Query(text="RETURN 1")

    with pytest.raises(ValidationError):
        query.text = "RETURN 2"


def test_preview_collapses_whitespace_and_truncates():
    query = Query(text="MATCH (n)\n    WHERE n.x = 1\n    RETURN n")
    assert query.preview() == "MATCH (n) WHERE n.x = 1 RETURN n"

    long_query = Query(text="RETURN " + "1 + " * 50 + "1")
    assert long_query.preview(20).endswith("...")
    assert len(long_query.preview(20)) == 23
