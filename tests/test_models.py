"""Tests for the shared domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from multisearch.domain.models import SearchResult, SearchSource


def test_search_result_is_immutable():
    result = SearchResult(title="Title", link="https://example.com")
    with pytest.raises(ValidationError):
        result.title = "Other"  # type: ignore[misc]


def test_search_result_optional_fields_default_to_none():
    result = SearchResult(title="Title", link="https://example.com/a")
    assert result.description is None
    assert result.image is None


@pytest.mark.parametrize("link", ["not a url", "ftp://example.com/file", "/relative/path", ""])
def test_search_result_rejects_invalid_links(link):
    with pytest.raises(ValidationError):
        SearchResult(title="Title", link=link)


@pytest.mark.parametrize(
    "link",
    [
        "https://example.com/a\"onclick=\"x",
        "https://example.com/a b",
        "https://example.com/<b>",
    ],
)
def test_search_result_rejects_unencoded_link_characters(link):
    with pytest.raises(ValidationError):
        SearchResult(title="Title", link=link)

def test_search_result_rejects_empty_title():
    with pytest.raises(ValidationError):
        SearchResult(title="", link="https://example.com")


def test_search_result_validates_image_url():
    with pytest.raises(ValidationError):
        SearchResult(title="Title", link="https://example.com", image="cover.png")
    result = SearchResult(title="Title", link="https://example.com", image="https://i.example.com/c.png")
    assert result.image == "https://i.example.com/c.png"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("stackoverflow", SearchSource.STACKOVERFLOW),
        ("Stack Overflow", SearchSource.STACKOVERFLOW),
        ("WIKIPEDIA", SearchSource.WIKIPEDIA),
        (" spotify ", SearchSource.SPOTIFY),
    ],
)
def test_search_source_parse(raw, expected):
    assert SearchSource.parse(raw) is expected


def test_search_source_parse_rejects_unknown():
    with pytest.raises(ValueError):
        SearchSource.parse("bing")


def test_search_source_labels():
    assert [source.label for source in SearchSource] == ["Stack Overflow", "Wikipedia", "Spotify"]
