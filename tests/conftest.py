"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from multisearch.i18n import I18nService


@pytest.fixture
def i18n() -> I18nService:
    return I18nService(default_locale="en")
