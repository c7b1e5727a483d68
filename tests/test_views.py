"""Tests for state rendering and keyboards."""

from __future__ import annotations

from multisearch.bot.keyboards import SearchCallback, SourceCallback, build_search_keyboard
from multisearch.bot.views import chunk_blocks, render_result_card, render_state
from multisearch.domain.models import SearchResult, SearchSource
from multisearch.domain.state import Failed, Idle, Loaded, Loading
from multisearch.services.sessions import SearchSession


def test_idle_renders_prompt(i18n):
    assert render_state(Idle(), i18n) == ["Enter a search term and select a source to get started."]


def test_loading_mentions_source(i18n):
    state = Loading(request_id=1, query="react hooks", source=SearchSource.STACKOVERFLOW)
    (text,) = render_state(state, i18n)
    assert "Searching stackoverflow..." in text


def test_failed_renders_message(i18n):
    assert render_state(Failed(message="Boom & co"), i18n) == ["Boom &amp; co"]


def test_empty_results_render_no_results_message(i18n):
    assert render_state(Loaded(results=()), i18n) == ["No results found. Try a different search term."]


def test_result_card_links_title_and_escapes_text(i18n):
    result = SearchResult(
        title="<script> & friends",
        link="https://example.com/a",
        description="Use a < b",
        image="https://example.com/cover.png",
    )
    card = render_result_card(result, i18n)
    assert card.startswith('<b><a href="https://example.com/a">&lt;script&gt; &amp; friends</a></b>')
    assert "Use a &lt; b" in card
    assert '<a href="https://example.com/cover.png">Image</a>' in card


def test_result_card_omits_missing_description(i18n):
    card = render_result_card(SearchResult(title="T", link="https://example.com"), i18n)
    assert "\n" not in card


def test_chunk_blocks_respects_limit():
    blocks = ["a" * 40, "b" * 40, "c" * 40]
    chunks = chunk_blocks(blocks, limit=90)
    assert chunks == [f"{'a' * 40}\n\n{'b' * 40}", "c" * 40]
    assert all(len(chunk) <= 90 for chunk in chunks)


def test_many_results_split_into_several_messages(i18n):
    results = tuple(
        SearchResult(title=f"Result {i}", link=f"https://example.com/{i}", description="d" * 900)
        for i in range(10)
    )
    texts = render_state(Loaded(results=results), i18n)
    assert len(texts) > 1
    assert sum(text.count("<b>") for text in texts) == 10


def test_keyboard_hidden_while_loading(i18n):
    session = SearchSession()
    session.begin("python")
    assert build_search_keyboard(session, i18n) is None


def test_keyboard_marks_selected_source_and_offers_search(i18n):
    session = SearchSession()
    session.select_source(SearchSource.WIKIPEDIA)
    ticket = session.begin("python")
    session.complete(ticket, [])

    markup = build_search_keyboard(session, i18n)

    source_row, search_row = markup.inline_keyboard
    assert [button.text for button in source_row] == ["Stack Overflow", "✅ Wikipedia", "Spotify"]
    assert SourceCallback.unpack(source_row[1].callback_data).source == "wikipedia"
    assert SearchCallback.unpack(search_row[0].callback_data).action == "run"


def test_keyboard_without_query_has_no_search_button(i18n):
    markup = build_search_keyboard(SearchSession(), i18n)
    assert len(markup.inline_keyboard) == 1


def test_result_card_escapes_quotes_in_href(i18n):
    # model_construct skips URL validation, so the renderer must escape on its own.
    result = SearchResult.model_construct(
        title="Quoted",
        link='https://example.com/a"b',
        description=None,
        image='https://example.com/c"d.png',
    )
    card = render_result_card(result, i18n)
    assert '<a href="https://example.com/a&quot;b">Quoted</a>' in card
    assert '<a href="https://example.com/c&quot;d.png">Image</a>' in card
    assert '"b"' not in card


def test_chunk_blocks_never_splits_a_block():
    blocks = ["<b>" + "x" * 50 + "</b>", "<b>short</b>"]
    chunks = chunk_blocks(blocks, limit=20)
    assert chunks == blocks


def test_long_description_keeps_cards_whole(i18n):
    results = tuple(
        SearchResult(title=f"Result {i}", link=f"https://example.com/{i}", description="&" * 5000)
        for i in range(3)
    )
    texts = render_state(Loaded(results=results), i18n)
    assert len(texts) == 3
    for text in texts:
        assert text.startswith("<b><a href=")
        assert text.count("<b>") == text.count("</b>") == 1
        assert text.endswith("&amp;")
        assert len(text) <= 4096
