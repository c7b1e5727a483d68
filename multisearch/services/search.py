"""Source adapters: route a query to one provider and normalize its results."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from multisearch.config import SearchSettings
from multisearch.domain.models import SearchResult, SearchSource
from multisearch.logging import logger
from multisearch.services.exceptions import SearchFailed, UnsupportedSource
from multisearch.utils.text import plain_text, truncate

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.".
URI_COMPONENT_SAFE = "!'()*~"


class SearchService:
    """Dispatch searches to Stack Overflow, Wikipedia or the simulated Spotify source.

    Every failure (transport, status, JSON, payload shape) surfaces as
    :class:`SearchFailed`; the cause is logged and chained.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: SearchSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or SearchSettings()

    async def search(self, query: str, source: SearchSource | str) -> list[SearchResult]:
        if source == SearchSource.STACKOVERFLOW:
            return await self._search_stackoverflow(query)
        if source == SearchSource.WIKIPEDIA:
            return await self._search_wikipedia(query)
        if source == SearchSource.SPOTIFY:
            return await self._search_spotify(query)
        logger.warning("search_failed", source=str(source), cause="unsupported_source")
        raise UnsupportedSource(source)

    async def _search_stackoverflow(self, query: str) -> list[SearchResult]:
        settings = self._settings
        params = {
            "q": query,
            "site": settings.stackoverflow_site,
            "order": "desc",
            "sort": "relevance",
            "pagesize": settings.page_size,
            "filter": "withbody",
        }
        data = await self._get_json(
            SearchSource.STACKOVERFLOW, str(settings.stackoverflow_api_url), params
        )

        def _map(payload: dict[str, Any]) -> list[SearchResult]:
            return [
                SearchResult(
                    title=plain_text(item["title"]),
                    link=item["link"],
                    description=truncate(
                        plain_text(item.get("body")), settings.description_char_limit
                    ),
                )
                for item in payload["items"]
            ]

        return self._normalize(SearchSource.STACKOVERFLOW, data, _map)

    async def _search_wikipedia(self, query: str) -> list[SearchResult]:
        settings = self._settings
        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "format": "json",
            "origin": "*",
            "srlimit": settings.page_size,
        }
        data = await self._get_json(
            SearchSource.WIKIPEDIA, str(settings.wikipedia_api_url), params
        )

        def _map(payload: dict[str, Any]) -> list[SearchResult]:
            return [
                SearchResult(
                    title=item["title"],
                    link=self.wikipedia_article_url(item["title"]),
                    description=plain_text(item.get("snippet")),
                )
                for item in payload["query"]["search"]
            ]

        return self._normalize(SearchSource.WIKIPEDIA, data, _map)

    async def _search_spotify(self, query: str) -> list[SearchResult]:
        # No public unauthenticated search API; simulate latency and results.
        await asyncio.sleep(self._settings.mock_delay_seconds)
        link = f"{self._settings.spotify_search_base_url}{quote(query, safe=URI_COMPONENT_SAFE)}"
        return [
            SearchResult(
                title=f"{query} - Top Track",
                link=link,
                description=f'This is a simulated result for "{query}" on Spotify.',
            ),
            SearchResult(
                title=f"{query} - Popular Artist",
                link=link,
                description="Simulated popular artist result.",
            ),
            SearchResult(
                title=f"{query} - Album",
                link=link,
                description="Simulated album result.",
            ),
        ]

    def wikipedia_article_url(self, title: str) -> str:
        """Canonical article URL: spaces become underscores, the rest is percent-encoded."""

        slug = quote(title.replace(" ", "_"), safe="")
        return f"{self._settings.wikipedia_article_base_url}{slug}"

    async def _get_json(
        self,
        source: SearchSource,
        url: str,
        params: dict[str, Any],
    ) -> Any:
        logger.info("search_request", source=source.value, url=url)
        try:
            response = await self._client.get(
                url,
                params=params,
                headers={"User-Agent": self._settings.user_agent},
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            detail = exc.response.text[:500] if exc.response is not None else str(exc)
            logger.warning(
                "search_failed",
                source=source.value,
                cause="http_status",
                status_code=status_code,
                detail=detail,
            )
            raise SearchFailed(source.value, f"HTTP {status_code}") from exc
        except httpx.RequestError as exc:
            logger.warning(
                "search_failed",
                source=source.value,
                cause="request_error",
                error=str(exc),
            )
            raise SearchFailed(source.value, f"request failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.warning(
                "search_failed",
                source=source.value,
                cause="invalid_json",
                detail=response.text[:500],
            )
            raise SearchFailed(source.value, "response is not valid JSON") from exc

    @staticmethod
    def _normalize(source: SearchSource, data: Any, mapper) -> list[SearchResult]:
        try:
            return mapper(data)
        except (KeyError, TypeError, AttributeError, ValidationError) as exc:
            logger.warning(
                "search_failed",
                source=source.value,
                cause="malformed_payload",
                error=repr(exc),
            )
            raise SearchFailed(source.value, "malformed payload") from exc


__all__ = ["SearchService"]
