"""
Unit tests for corrector.py - business-rule normalization.

Reference: Tuesday 2025-11-04 09:00 Europe/Madrid (conftest.reference_date).
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from agent.temporal.corrector import correct, has_explicit_time, is_weekday_reference
from agent.temporal.models import Policy

MADRID_TZ = ZoneInfo("Europe/Madrid")


def _at(year, month, day, hour, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=MADRID_TZ)


class TestExpressionPredicates:
    @pytest.mark.parametrize("expression", ["el viernes", "el próximo lunes", "este sábado", "aquest dijous"])
    def test_weekday_reference(self, expression):
        assert is_weekday_reference(expression) is True

    @pytest.mark.parametrize(
        "expression",
        ["en 3 días", "dentro de dos días", "d'aquí a 2 dies", "un par de días", "pasado mañana", "el 15 de noviembre"],
    )
    def test_not_weekday_reference(self, expression):
        assert is_weekday_reference(expression) is False

    def test_day_count_wins_over_weekday(self):
        assert is_weekday_reference("el lunes en 3 días") is False

    @pytest.mark.parametrize("expression", ["a las 7", "10:30", "a les 9", "19h", "7 pm", "a mediodía"])
    def test_explicit_time(self, expression):
        assert has_explicit_time(expression) is True

    @pytest.mark.parametrize("expression", ["el viernes", "mañana", "en 3 días"])
    def test_no_explicit_time(self, expression):
        assert has_explicit_time(expression) is False


class TestPastWeekday:
    def test_past_friday_moves_forward(self, reference_date):
        result = correct(_at(2025, 10, 31, 10), reference_date, "el viernes a las 10", Policy())

        assert result.moment == _at(2025, 11, 7, 10)
        assert result.applied == ["past_weekday"]

    def test_same_weekday_earlier_today_moves_a_week(self, reference_date):
        result = correct(_at(2025, 11, 4, 8, 30), reference_date, "el martes a las 8:30", Policy())

        assert result.moment == _at(2025, 11, 11, 8, 30)

    def test_future_candidate_untouched(self, reference_date):
        result = correct(_at(2025, 11, 7, 10), reference_date, "el viernes a las 10", Policy())

        assert result.moment == _at(2025, 11, 7, 10)
        assert result.changed is False

    def test_day_count_not_corrected(self, reference_date):
        candidate = _at(2025, 11, 3, 10)
        result = correct(candidate, reference_date, "en 3 días a las 10", Policy())

        assert result.moment == candidate
        assert "past_weekday" not in result.applied

    def test_flag_disabled(self, reference_date):
        candidate = _at(2025, 10, 31, 10)
        result = correct(
            candidate, reference_date, "el viernes a las 10", Policy(correct_past_weekdays=False)
        )

        assert result.moment == candidate

    @pytest.mark.parametrize(
        "name,weekday",
        [("lunes", 0), ("martes", 1), ("miércoles", 2), ("jueves", 3), ("viernes", 4), ("sábado", 5), ("domingo", 6)],
    )
    def test_never_before_reference(self, name, weekday, reference_date):
        for offset in range(7):
            reference = reference_date + timedelta(days=offset)
            # Same weekday, one week in the past
            last_week = reference - timedelta(days=7 + (reference.weekday() - weekday) % 7)
            candidate = last_week.replace(hour=10, minute=0)

            result = correct(candidate, reference, f"el {name} a las 10", Policy())

            assert result.moment >= reference
            assert result.moment.weekday() == weekday


class TestDefaultHour:
    def test_midnight_without_time_token(self, reference_date):
        result = correct(_at(2025, 11, 7, 0), reference_date, "el viernes", Policy())

        assert result.moment == _at(2025, 11, 7, 12)
        assert result.applied == ["default_hour"]

    def test_policy_default_hour(self, reference_date):
        result = correct(_at(2025, 11, 7, 0), reference_date, "el viernes", Policy(default_hour=14))

        assert result.moment.hour == 14

    def test_explicit_midnight_kept(self, reference_date):
        result = correct(_at(2025, 11, 7, 0), reference_date, "el viernes a medianoche", Policy())

        assert result.moment.hour == 0

    def test_flag_disabled(self, reference_date):
        result = correct(
            _at(2025, 11, 7, 0), reference_date, "el viernes", Policy(assign_default_hour=False)
        )

        assert result.moment.hour == 0


class TestAmbiguousHour:
    def test_bare_seven_is_evening(self, reference_date):
        result = correct(_at(2025, 11, 7, 7), reference_date, "el viernes a las 7", Policy())

        assert result.moment == _at(2025, 11, 7, 19)
        assert result.applied == ["ambiguous_hour"]

    def test_catalan_bare_hour(self, reference_date):
        result = correct(_at(2025, 11, 7, 7), reference_date, "divendres a les 7", Policy())

        assert result.moment.hour == 19

    def test_morning_qualifier_kept(self, reference_date):
        result = correct(
            _at(2025, 11, 7, 7), reference_date, "el viernes a las 7 de la mañana", Policy()
        )

        assert result.moment.hour == 7

    def test_hour_above_threshold_kept(self, reference_date):
        result = correct(_at(2025, 11, 7, 9), reference_date, "el viernes a las 9", Policy())

        assert result.moment.hour == 9

    def test_parser_already_pm(self, reference_date):
        result = correct(_at(2025, 11, 7, 19), reference_date, "el viernes a las 7", Policy())

        assert result.moment.hour == 19
        assert result.changed is False

    def test_past_then_ambiguous(self, reference_date):
        result = correct(_at(2025, 10, 31, 7), reference_date, "el viernes a las 7", Policy())

        assert result.moment == _at(2025, 11, 7, 19)
        assert result.applied == ["past_weekday", "ambiguous_hour"]

    def test_flag_disabled(self, reference_date):
        result = correct(
            _at(2025, 11, 7, 7), reference_date, "el viernes a las 7", Policy(promote_ambiguous_hours=False)
        )

        assert result.moment.hour == 7

    def test_noon_never_promoted_past_midnight(self, reference_date):
        policy = Policy(ambiguous_hour_pm_threshold=13)
        result = correct(_at(2025, 11, 7, 12), reference_date, "el viernes a las 12", policy)

        assert result.moment == _at(2025, 11, 7, 12)
        assert "ambiguous_hour" not in result.applied


class TestMorningWindow:
    def test_disabled_by_default(self, reference_date):
        result = correct(_at(2025, 11, 6, 11), reference_date, "el jueves a las 11", Policy())

        assert result.moment.hour == 11

    def test_other_weekday_moves_to_default_hour(self, reference_date):
        policy = Policy(morning_window_weekday=4, default_hour=14)
        result = correct(_at(2025, 11, 6, 11), reference_date, "el jueves a las 11", policy)

        assert result.moment == _at(2025, 11, 6, 14)
        assert result.applied == ["morning_window"]

    def test_window_weekday_untouched(self, reference_date):
        policy = Policy(morning_window_weekday=4, default_hour=14)
        result = correct(_at(2025, 11, 7, 11), reference_date, "el viernes a las 11", policy)

        assert result.moment.hour == 11

    def test_outside_window_untouched(self, reference_date):
        policy = Policy(morning_window_weekday=4, default_hour=14)
        result = correct(_at(2025, 11, 6, 16), reference_date, "el jueves a las 16", policy)

        assert result.moment.hour == 16
