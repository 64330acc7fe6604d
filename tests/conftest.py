"""
Test configuration and fixtures.

This module sets up test environment and provides shared fixtures for all tests.
"""

import os
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

# No real model calls in tests: an empty key disables the shared client.
# Must be set BEFORE any import of shared.config
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["TIMEZONE"] = "Europe/Madrid"

MADRID_TZ = ZoneInfo("Europe/Madrid")


@pytest.fixture
def reference_date():
    """Fixed reference: Tuesday, Nov 4, 2025, 09:00 Europe/Madrid."""
    return datetime(2025, 11, 4, 9, 0, 0, tzinfo=MADRID_TZ)


@pytest.fixture
def friday_reference():
    """Fixed reference: Friday, Nov 7, 2025, 10:00 Europe/Madrid."""
    return datetime(2025, 11, 7, 10, 0, 0, tzinfo=MADRID_TZ)


@pytest.fixture
def mock_llm_factory():
    """
    Build a stub chat model whose ainvoke() answers with fixed text.

    Pass an Exception instance to make ainvoke() raise it instead.
    """
    def _make(answer):
        llm = MagicMock()
        if isinstance(answer, Exception):
            llm.ainvoke = AsyncMock(side_effect=answer)
        else:
            llm.ainvoke = AsyncMock(return_value=MagicMock(content=answer))
        return llm
    return _make
