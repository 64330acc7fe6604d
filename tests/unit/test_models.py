"""
Unit tests for models.py - request validation and policy construction.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from agent.temporal.models import InvalidRequestError, Policy, ResolutionRequest
from shared.config import Settings


class TestResolutionRequestFromRaw:
    def test_offset_reference(self):
        request = ResolutionRequest.from_raw("2025-11-04T09:00:00+01:00", "  pasado mañana ", "Europe/Madrid")

        assert request.expression == "pasado mañana"
        assert request.timezone == "Europe/Madrid"
        assert request.reference == datetime(2025, 11, 4, 9, 0, tzinfo=ZoneInfo("Europe/Madrid"))
        assert request.reference.tzinfo == request.zone

    def test_utc_reference_converted_to_zone(self):
        request = ResolutionRequest.from_raw("2025-11-04T08:00:00Z", "mañana", "Europe/Madrid")

        assert request.reference.hour == 9
        assert request.reference.utcoffset().total_seconds() == 3600

    def test_naive_reference_is_wall_time_in_zone(self):
        request = ResolutionRequest.from_raw("2025-07-01T10:00:00", "mañana", "Europe/Madrid")

        assert request.reference.hour == 10
        assert request.reference.utcoffset().total_seconds() == 7200

    def test_default_zone_from_settings(self):
        request = ResolutionRequest.from_raw("2025-11-04T09:00:00+01:00", "mañana")

        assert request.timezone == "Europe/Madrid"

    def test_other_zone(self):
        request = ResolutionRequest.from_raw("2025-11-04T09:00:00+01:00", "mañana", "America/Mexico_City")

        assert request.reference.hour == 2

    @pytest.mark.parametrize(
        "referencia,expresion",
        [(None, "mañana"), ("", "mañana"), ("2025-11-04T09:00:00+01:00", None), ("2025-11-04T09:00:00+01:00", "   ")],
    )
    def test_missing_values(self, referencia, expresion):
        with pytest.raises(InvalidRequestError, match="Faltan parámetros requeridos"):
            ResolutionRequest.from_raw(referencia, expresion, "Europe/Madrid")

    def test_invalid_reference(self):
        with pytest.raises(InvalidRequestError, match="Referencia inválida"):
            ResolutionRequest.from_raw("el martes", "mañana", "Europe/Madrid")

    def test_invalid_zone(self):
        with pytest.raises(InvalidRequestError, match="Zona horaria inválida: Mars/Olympus"):
            ResolutionRequest.from_raw("2025-11-04T09:00:00+01:00", "mañana", "Mars/Olympus")

    def test_invalid_request_error_is_value_error(self):
        assert issubclass(InvalidRequestError, ValueError)


class TestPolicy:
    def test_defaults(self):
        policy = Policy()

        assert policy.weekend_skip is True
        assert policy.default_hour == 12
        assert policy.morning_window_weekday is None
        assert policy.ambiguous_hour_pm_threshold == 8

    def test_from_settings(self):
        settings = Settings(
            POLICY_WEEKEND_SKIP=False,
            POLICY_DEFAULT_HOUR=14,
            POLICY_MORNING_WINDOW_WEEKDAY=4,
            POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD=9,
            POLICY_PROMOTE_AMBIGUOUS_HOURS=False,
        )

        policy = Policy.from_settings(settings)

        assert policy == Policy(
            weekend_skip=False,
            default_hour=14,
            morning_window_weekday=4,
            ambiguous_hour_pm_threshold=9,
            correct_past_weekdays=True,
            assign_default_hour=True,
            promote_ambiguous_hours=False,
        )

    def test_policy_is_frozen(self):
        policy = Policy()

        with pytest.raises(AttributeError):
            policy.default_hour = 14
