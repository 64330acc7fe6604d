"""Result assembler - renders an Outcome into the /parse-fecha wire format."""

from datetime import datetime
from typing import Any

from agent.temporal.lexicon import get_weekday_name, is_weekend_name
from agent.temporal.models import Outcome, Resolved, Unresolved

SENTINEL = "sin_definir"
UNRESOLVED_MESSAGE = "No se pudo interpretar la fecha."


def _sentinel_fields() -> dict[str, Any]:
    return {
        "fecha_resuelta": SENTINEL,
        "dia_semana": SENTINEL,
        "hora": SENTINEL,
        "iso_datetime": SENTINEL,
        "es_finde": False,
        "es_pasado": False,
    }


def assemble(outcome: Outcome, reference: datetime) -> dict[str, Any]:
    """
    Render an outcome for the API response.

    - Resolved: weekday in the detected language, weekend/past flags,
      date, time and ISO string with milliseconds and offset
    - Undefined: sentinel values in every field
    - Unresolved: sentinel values plus error=True and a message

    Example:
        >>> assemble(Resolved(ResolvedMoment(friday_19h, Stage.CORRECTED)), tuesday_9h)
        {'fecha_resuelta': '2025-11-07', 'dia_semana': 'viernes', 'hora': '19:00',
         'iso_datetime': '2025-11-07T19:00:00.000+01:00', 'es_finde': False, 'es_pasado': False}
    """
    if isinstance(outcome, Resolved):
        moment = outcome.value.moment
        language = outcome.value.language
        dia_semana = get_weekday_name(moment, language)
        return {
            "fecha_resuelta": moment.strftime("%Y-%m-%d"),
            "dia_semana": dia_semana,
            "hora": moment.strftime("%H:%M"),
            "iso_datetime": moment.isoformat(timespec="milliseconds"),
            "es_finde": is_weekend_name(dia_semana, language),
            "es_pasado": moment < reference,
        }

    fields = _sentinel_fields()
    if isinstance(outcome, Unresolved):
        return {"error": True, "mensaje": UNRESOLVED_MESSAGE, **fields}
    return fields
