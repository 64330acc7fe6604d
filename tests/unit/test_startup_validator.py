"""Unit tests for startup configuration validation."""

from unittest.mock import patch

import pytest

from shared.config import Settings
from shared.startup_validator import StartupValidationError, validate_startup_config


async def _validate_with(**overrides):
    settings = Settings(**overrides)
    with patch("shared.startup_validator.get_settings", return_value=settings):
        return await validate_startup_config()


@pytest.mark.asyncio
async def test_default_configuration_passes():
    results = await _validate_with(OPENROUTER_API_KEY="sk-or-real-key")

    assert all(results.values())


@pytest.mark.asyncio
async def test_missing_model_key_only_warns():
    results = await _validate_with(OPENROUTER_API_KEY="")

    assert results["llm_api_key"] is False
    assert results["default_timezone"] is True


@pytest.mark.asyncio
async def test_invalid_timezone_blocks_startup():
    with pytest.raises(StartupValidationError, match="Mars/Olympus"):
        await _validate_with(TIMEZONE="Mars/Olympus")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"POLICY_DEFAULT_HOUR": 24}, "POLICY_DEFAULT_HOUR"),
        ({"POLICY_MORNING_WINDOW_WEEKDAY": 7}, "POLICY_MORNING_WINDOW_WEEKDAY"),
        ({"POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD": 0}, "POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD"),
        ({"POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD": 13}, "POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD"),
    ],
)
async def test_invalid_policy_blocks_startup(overrides, message):
    with pytest.raises(StartupValidationError, match=message):
        await _validate_with(**overrides)
