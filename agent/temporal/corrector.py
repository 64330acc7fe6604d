"""
Rule corrector - business-rule normalization of parsed candidates.

Applies, in order, each rule behind its own Policy flag:
    past_weekday    Named weekday that the parser placed in the past → next occurrence
    default_hour    Midnight candidate without a time token → policy.default_hour
    ambiguous_hour  "a las 7" without a morning qualifier → 19:00
    morning_window  10:00-14:00 on any weekday but policy.morning_window_weekday → default hour

Day-count phrases ("en 3 días", "pasado mañana") are never past-corrected:
they are relative offsets and may land on a weekend.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from agent.temporal.classifier import RELATIVE_COUNT_PATTERN
from agent.temporal.lexicon import WEEKDAY_ALTERNATION
from agent.temporal.models import Policy

logger = logging.getLogger(__name__)

MORNING_WINDOW_START = 10
MORNING_WINDOW_END = 14  # exclusive

WEEKDAY_REFERENCE_PATTERN = re.compile(
    r"\b(?:el|este|esta|ese|aquest|aquell|pr[óo]ximo|proper)\s+"
    rf"(?:{WEEKDAY_ALTERNATION})\b"
)

DAY_COUNT_PATTERN = re.compile(
    r"\bun\s+par\s+de\s+d[íi]as\b"
    r"|\bun\s+parell\s+de\s+dies\b"
    r"|\bpasado\s+ma[ñn]ana\b"
    r"|\bdem[àa]\s+passat\b"
)

EXPLICIT_TIME_PATTERN = re.compile(
    r"\b\d{1,2}[:.h]\d{2}\b"
    r"|\ba\s+l[ae]s?\s+(?:\d{1,2}|una|dos|tres|cuatro|cinco|seis|siete|ocho|nueve|diez|once|doce)\b"
    r"|\b\d{1,2}\s*(?:h|hs|am|pm|a\.m\.|p\.m\.)(?![\w])"
    r"|\b(?:mediod[íi]a|medianoche|migdia|mitjanit)\b"
)

BARE_HOUR_PATTERN = re.compile(r"\ba\s+l[ae]s?\s+(?P<hour>\d{1,2})(?:[:.h]\d{2})?(?!\d)")

MORNING_QUALIFIER_PATTERN = re.compile(
    r"(?<![\w])(?:"
    r"de\s+la\s+ma[ñn]ana|por\s+la\s+ma[ñn]ana|del\s+mat[íi]|al\s+mat[íi]|pel\s+mat[íi]"
    r"|de\s+la\s+madrugada|de\s+la\s+matinada|am|a\.m\."
    r")(?![\w])"
)


@dataclass
class Correction:
    """Corrected candidate plus the names of the rules that changed it."""

    moment: datetime
    applied: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def is_weekday_reference(expression: str) -> bool:
    """True for "el viernes"-style phrases that are not relative day counts."""
    text = expression.lower()
    if RELATIVE_COUNT_PATTERN.search(text) or DAY_COUNT_PATTERN.search(text):
        return False
    return WEEKDAY_REFERENCE_PATTERN.search(text) is not None


def has_explicit_time(expression: str) -> bool:
    return EXPLICIT_TIME_PATTERN.search(expression.lower()) is not None


def _correct_past_weekday(candidate: datetime, reference: datetime) -> datetime:
    days_ahead = (candidate.weekday() - reference.weekday()) % 7 or 7
    return (reference + timedelta(days=days_ahead)).replace(
        hour=candidate.hour,
        minute=candidate.minute,
        second=candidate.second,
        microsecond=candidate.microsecond,
    )


def _promote_ambiguous_hour(
    candidate: datetime, expression: str, policy: Policy
) -> datetime | None:
    text = expression.lower()
    match = BARE_HOUR_PATTERN.search(text)
    if match is None or MORNING_QUALIFIER_PATTERN.search(text):
        return None

    hour = int(match.group("hour"))
    if candidate.hour != hour or not (1 <= hour < policy.ambiguous_hour_pm_threshold):
        return None
    if hour + 12 > 23:
        return None

    return candidate.replace(hour=hour + 12)


def correct(
    candidate: datetime,
    reference: datetime,
    expression: str,
    policy: Policy,
) -> Correction:
    """
    Apply the enabled correction rules to a parser candidate.

    Args:
        candidate: Aware datetime produced by the base parser
        reference: Aware reference datetime
        expression: Raw user expression (rules inspect its wording)
        policy: Active correction policy

    Returns:
        Correction with the final moment and the applied rule names

    Example:
        Reference Tuesday 2025-11-04 09:00, parser gave Friday 2025-10-31 07:00
        for "el viernes a las 7": past_weekday moves it to 2025-11-07, then
        ambiguous_hour turns 07:00 into 19:00.
    """
    result = Correction(moment=candidate)

    if (
        policy.correct_past_weekdays
        and result.moment < reference
        and is_weekday_reference(expression)
    ):
        result.moment = _correct_past_weekday(result.moment, reference)
        result.applied.append("past_weekday")

    if (
        policy.assign_default_hour
        and result.moment.hour == 0
        and result.moment.minute == 0
        and not has_explicit_time(expression)
    ):
        result.moment = result.moment.replace(
            hour=policy.default_hour, minute=0, second=0, microsecond=0
        )
        result.applied.append("default_hour")

    if policy.promote_ambiguous_hours:
        promoted = _promote_ambiguous_hour(result.moment, expression, policy)
        if promoted is not None:
            result.moment = promoted
            result.applied.append("ambiguous_hour")

    if (
        policy.morning_window_weekday is not None
        and MORNING_WINDOW_START <= result.moment.hour < MORNING_WINDOW_END
        and result.moment.weekday() != policy.morning_window_weekday
    ):
        moved = result.moment.replace(
            hour=policy.default_hour, minute=0, second=0, microsecond=0
        )
        if moved != result.moment:
            result.moment = moved
            result.applied.append("morning_window")

    if result.changed:
        logger.info(
            f"Candidate corrected | rules={result.applied} | "
            f"{candidate.isoformat()} → {result.moment.isoformat()}"
        )

    return result
