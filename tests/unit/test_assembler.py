"""Unit tests for assembler.py - wire format rendering."""

from datetime import datetime
from zoneinfo import ZoneInfo

from agent.temporal.assembler import SENTINEL, UNRESOLVED_MESSAGE, assemble
from agent.temporal.models import Language, Resolved, ResolvedMoment, Stage, Undefined, Unresolved

MADRID_TZ = ZoneInfo("Europe/Madrid")


def _resolved(moment, language=Language.SPANISH):
    return Resolved(ResolvedMoment(moment=moment, stage=Stage.CORRECTED, language=language))


class TestResolved:
    def test_friday_evening(self, reference_date):
        moment = datetime(2025, 11, 7, 19, 0, tzinfo=MADRID_TZ)

        result = assemble(_resolved(moment), reference_date)

        assert result == {
            "fecha_resuelta": "2025-11-07",
            "dia_semana": "viernes",
            "hora": "19:00",
            "iso_datetime": "2025-11-07T19:00:00.000+01:00",
            "es_finde": False,
            "es_pasado": False,
        }

    def test_weekend_flag(self, reference_date):
        moment = datetime(2025, 11, 8, 12, 0, tzinfo=MADRID_TZ)

        result = assemble(_resolved(moment), reference_date)

        assert result["dia_semana"] == "sábado"
        assert result["es_finde"] is True

    def test_catalan_weekday_label(self, reference_date):
        moment = datetime(2025, 11, 9, 12, 0, tzinfo=MADRID_TZ)

        result = assemble(_resolved(moment, Language.CATALAN), reference_date)

        assert result["dia_semana"] == "diumenge"
        assert result["es_finde"] is True

    def test_past_flag(self, reference_date):
        moment = datetime(2025, 11, 3, 12, 0, tzinfo=MADRID_TZ)

        result = assemble(_resolved(moment), reference_date)

        assert result["es_pasado"] is True
        assert result["dia_semana"] == "lunes"

    def test_summer_offset(self):
        reference = datetime(2025, 7, 1, 9, 0, tzinfo=MADRID_TZ)
        moment = datetime(2025, 7, 4, 10, 30, tzinfo=MADRID_TZ)

        result = assemble(_resolved(moment), reference)

        assert result["iso_datetime"] == "2025-07-04T10:30:00.000+02:00"
        assert result["hora"] == "10:30"


class TestSentinels:
    def test_undefined(self, reference_date):
        result = assemble(Undefined(), reference_date)

        assert result == {
            "fecha_resuelta": SENTINEL,
            "dia_semana": SENTINEL,
            "hora": SENTINEL,
            "iso_datetime": SENTINEL,
            "es_finde": False,
            "es_pasado": False,
        }
        assert "error" not in result

    def test_unresolved(self, reference_date):
        result = assemble(Unresolved(), reference_date)

        assert result["error"] is True
        assert result["mensaje"] == UNRESOLVED_MESSAGE
        assert result["fecha_resuelta"] == SENTINEL
        assert result["es_finde"] is False
