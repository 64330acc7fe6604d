"""
Fallback resolver - last-resort date resolution with a generative model.

Used when the base parser finds nothing, or when the corrected candidate is
still in the past. The model receives one deterministic prompt with the
reference instant, the zone, the raw expression and the correction rules
stated as instructions, and must answer with a single ISO 8601 datetime or
the SIN_DEFINIR token.

Known limitation: even at temperature 0 the provider may answer differently
for the same prompt. Tests use a stubbed client.
"""

import logging
import re
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from dateutil.parser import isoparse

from agent.temporal.llm_client import invoke_model
from agent.temporal.models import Policy, Undefined

logger = logging.getLogger(__name__)

UNDEFINED_TOKEN = "SIN_DEFINIR"

SYSTEM_PROMPT = (
    "Eres un resolutor de expresiones temporales en castellano y catalán. "
    "Responde SOLO con una fecha ISO 8601 con desplazamiento horario o con "
    f"{UNDEFINED_TOKEN}."
)

_ISO_DATETIME = re.compile(
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?"
)


def build_fallback_prompt(
    expression: str, reference: datetime, timezone: str, policy: Policy
) -> str:
    """Build the user prompt. Same inputs always give the same prompt."""
    threshold = policy.ambiguous_hour_pm_threshold
    if threshold >= 2:
        pm_example = min(7, threshold - 1)
        ambiguous_rule = (
            f"Una hora sin \"de la mañana\" ni \"am\" menor que {threshold} es de la tarde: "
            f"\"a las {pm_example}\" significa {pm_example + 12:02d}:00"
        )
    else:
        ambiguous_rule = "Respeta la hora indicada tal cual, sin pasarla a la tarde"
    return f"""FECHA DE REFERENCIA: {reference.isoformat()}
ZONA HORARIA: {timezone}
EXPRESIÓN DEL USUARIO: "{expression}"

REGLAS:
1. NUNCA devuelvas una fecha anterior a la fecha de referencia.
2. Si la expresión cuenta días ("en 3 días", "dentro de dos días", "d'aquí a 2 dies", "pasado mañana"), suma los días tal cual aunque caiga en fin de semana.
3. Si no se indica hora, usa las {policy.default_hour:02d}:00.
4. {ambiguous_rule}.
5. "La semana que viene", "la próxima semana" o "la setmana que ve" significan al menos 7 días después de la referencia.
6. Si la expresión no contiene ninguna referencia temporal (saludos, agradecimientos), responde exactamente {UNDEFINED_TOKEN}.

Responde SOLO con la fecha en formato ISO 8601 con desplazamiento (ej: 2025-11-07T19:00:00+01:00) o {UNDEFINED_TOKEN}."""


def parse_model_answer(answer: str, zone: ZoneInfo) -> datetime | Undefined | None:
    """
    Interpret a cleaned model answer.

    Returns:
        Undefined() for the sentinel token, an aware datetime in `zone`,
        or None when the answer is not a datetime
    """
    if answer.strip().upper() == UNDEFINED_TOKEN:
        return Undefined()

    match = _ISO_DATETIME.search(answer)
    if match is None:
        logger.warning(f"Model answer is not a datetime: '{answer[:80]}'")
        return None

    try:
        parsed = isoparse(match.group(0).replace(" ", "T"))
    except ValueError as e:
        logger.warning(f"Could not parse model answer '{answer[:80]}': {e}")
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=zone)
    return parsed.astimezone(zone)


class FallbackResolver:
    """Generative model fallback behind a single injected client."""

    def __init__(self, llm: Any, policy: Policy, timeout: float | None = None):
        self.llm = llm
        self.policy = policy
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return self.llm is not None

    async def resolve_with_model(
        self, expression: str, reference: datetime, timezone: str
    ) -> datetime | Undefined | None:
        """
        Ask the model to resolve the expression.

        Args:
            expression: Raw user expression
            reference: Aware reference datetime
            timezone: IANA zone id of the request

        Returns:
            Aware datetime, Undefined() when the model answers the sentinel,
            or None when the model is unavailable, fails or answers garbage
        """
        if self.llm is None:
            return None

        prompt = build_fallback_prompt(expression, reference, timezone, self.policy)
        answer = await invoke_model(self.llm, SYSTEM_PROMPT, prompt, timeout=self.timeout)
        if not answer:
            return None

        result = parse_model_answer(answer, ZoneInfo(timezone))
        logger.info(f"Model fallback | expression='{expression}' | answer='{answer}'")
        return result
