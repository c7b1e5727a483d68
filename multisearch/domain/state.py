"""Search lifecycle states for a single chat."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from multisearch.domain.models import SearchResult, SearchSource


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Loading:
    request_id: int
    query: str
    source: SearchSource


@dataclass(frozen=True, slots=True)
class Failed:
    message: str


@dataclass(frozen=True, slots=True)
class Loaded:
    results: tuple[SearchResult, ...]


SearchState = Union[Idle, Loading, Failed, Loaded]


@dataclass(frozen=True, slots=True)
class SearchTicket:
    """Proof that a submission was accepted; stale tickets are ignored."""

    request_id: int
    query: str
    source: SearchSource


__all__ = [
    "Failed",
    "Idle",
    "Loaded",
    "Loading",
    "SearchState",
    "SearchTicket",
]
