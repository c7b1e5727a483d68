"""Per-chat search lifecycle kept in memory."""

from __future__ import annotations

from typing import Iterable

from multisearch.domain.models import SearchResult, SearchSource
from multisearch.domain.state import (
    Failed,
    Idle,
    Loaded,
    Loading,
    SearchState,
    SearchTicket,
)


class SearchSession:
    """Holds the query, selected source and lifecycle state of one chat.

    Submissions go through :meth:`begin`, which hands out a ticket tagged with
    a monotonically increasing request id. Outcomes are applied only while
    that ticket is current, so a superseded response can never overwrite
    newer state.
    """

    def __init__(self, source: SearchSource = SearchSource.STACKOVERFLOW) -> None:
        self.query = ""
        self.source = source
        self.state: SearchState = Idle()
        self._sequence = 0

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def has_searched(self) -> bool:
        return not isinstance(self.state, Idle)

    @property
    def results(self) -> tuple[SearchResult, ...]:
        if isinstance(self.state, Loaded):
            return self.state.results
        return ()

    @property
    def error(self) -> str | None:
        if isinstance(self.state, Failed):
            return self.state.message
        return None

    def select_source(self, source: SearchSource) -> None:
        self.source = source

    def begin(self, query: str) -> SearchTicket | None:
        """Move to ``Loading`` unless the query is blank or a search is pending."""

        if not query.strip() or self.is_loading:
            return None
        self._sequence += 1
        self.query = query
        ticket = SearchTicket(request_id=self._sequence, query=query, source=self.source)
        self.state = Loading(request_id=ticket.request_id, query=query, source=ticket.source)
        return ticket

    def complete(self, ticket: SearchTicket, results: Iterable[SearchResult]) -> bool:
        if not self._is_current(ticket):
            return False
        self.state = Loaded(results=tuple(results))
        return True

    def fail(self, ticket: SearchTicket, message: str) -> bool:
        if not self._is_current(ticket):
            return False
        self.state = Failed(message=message)
        return True

    def cancel(self) -> bool:
        """Drop an in-flight search; its response will be discarded."""

        if not self.is_loading:
            return False
        self._sequence += 1
        self.state = Idle()
        return True

    def _is_current(self, ticket: SearchTicket) -> bool:
        return (
            isinstance(self.state, Loading)
            and self.state.request_id == ticket.request_id
            and ticket.request_id == self._sequence
        )


class SessionStore:
    """In-memory registry of chat sessions; nothing survives a restart."""

    def __init__(self, default_source: SearchSource = SearchSource.STACKOVERFLOW) -> None:
        self._default_source = default_source
        self._sessions: dict[int, SearchSession] = {}

    def get(self, chat_id: int) -> SearchSession:
        session = self._sessions.get(chat_id)
        if session is None:
            session = SearchSession(source=self._default_source)
            self._sessions[chat_id] = session
        return session

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["SearchSession", "SessionStore"]
