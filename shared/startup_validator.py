"""
Startup configuration validation module.

This module provides startup-time validation for critical configuration
to catch misconfigurations early (fail-fast) rather than at runtime when
the first request hits the resolver.

Usage:
    from shared.startup_validator import validate_startup_config, StartupValidationError

    async def main():
        try:
            await validate_startup_config()
        except StartupValidationError as e:
            logger.critical(f"Startup blocked: {e}")
            sys.exit(1)
"""

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shared.config import get_settings

logger = logging.getLogger(__name__)


class StartupValidationError(Exception):
    """Raised when critical startup validation fails."""

    pass


async def validate_startup_config() -> dict[str, bool]:
    """
    Validate all critical configuration at startup.

    Performs tiered validation:
    - TIER 1 (CRITICAL): Block startup if any fail
    - TIER 2 (IMPORTANT): Warn but allow startup

    Returns:
        dict of {check_name: passed} for all validations

    Raises:
        StartupValidationError: If any CRITICAL check fails
    """
    settings = get_settings()
    results: dict[str, bool] = {}
    critical_failures: list[str] = []

    # =========================================================================
    # TIER 1: CRITICAL (block startup if any fail)
    # =========================================================================

    # 1. Default timezone must exist in the tz database
    try:
        ZoneInfo(settings.TIMEZONE)
        results["default_timezone"] = True
    except (ZoneInfoNotFoundError, ValueError):
        results["default_timezone"] = False
        critical_failures.append(f"TIMEZONE '{settings.TIMEZONE}' is not a valid IANA zone")

    # 2. Policy values must be usable as datetime fields
    results["policy_default_hour"] = 0 <= settings.POLICY_DEFAULT_HOUR <= 23
    if not results["policy_default_hour"]:
        critical_failures.append(
            f"POLICY_DEFAULT_HOUR must be 0-23 (got {settings.POLICY_DEFAULT_HOUR})"
        )

    weekday = settings.POLICY_MORNING_WINDOW_WEEKDAY
    results["policy_morning_window_weekday"] = weekday is None or 0 <= weekday <= 6
    if not results["policy_morning_window_weekday"]:
        critical_failures.append(
            f"POLICY_MORNING_WINDOW_WEEKDAY must be 0-6 or unset (got {weekday})"
        )

    threshold = settings.POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD
    results["policy_pm_threshold"] = 1 <= threshold <= 12
    if not results["policy_pm_threshold"]:
        critical_failures.append(
            f"POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD must be 1-12 (got {threshold})"
        )

    # =========================================================================
    # TIER 2: IMPORTANT (warn but allow startup)
    # =========================================================================

    results["llm_api_key"] = settings.llm_enabled
    if not settings.llm_enabled:
        logger.warning(
            "OPENROUTER_API_KEY not configured - Catalan model translation and "
            "model fallback are disabled"
        )

    if critical_failures:
        for failure in critical_failures:
            logger.critical(f"Startup validation failed: {failure}")
        raise StartupValidationError("; ".join(critical_failures))

    logger.info(f"Startup configuration validated: {results}")
    return results
