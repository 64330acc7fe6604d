"""
Pattern preprocessor - ordered special-case rules.

Some phrasings are mishandled or resolved inconsistently by the general date
parser. They are handled here by an explicit, ordered table of
(regex, resolver) rules. The first rule whose regex matches produces the final
moment and no later stage runs.

Rules (evaluated top to bottom):
    1. day_after_tomorrow_at_hour  "pasado mañana a las 10", "demà passat a les 9:30"
    2. day_after_tomorrow          "pasado mañana", "demà passat"
    3. weekday_next_week           "el martes de la semana que viene", "dijous de la setmana vinent"
    4. weekday_coming              "el viernes que viene", "dimarts que ve", "el próximo lunes"

Rule 3 MUST stay above rule 4: both match "<weekday> ... semana que viene".
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from agent.temporal.lexicon import WEEKDAY_ALTERNATION, weekday_from_name
from agent.temporal.models import Policy

logger = logging.getLogger(__name__)

FRIDAY = 4
SATURDAY = 5
SUNDAY = 6

Resolver = Callable[[re.Match, datetime, Policy], datetime]


@dataclass(frozen=True)
class PatternRule:
    """A named (regex, resolver) pair."""

    name: str
    pattern: re.Pattern
    resolver: Resolver


@dataclass(frozen=True)
class PatternMatch:
    """Result of the first matching rule."""

    rule: str
    moment: datetime


def _at_default_hour(moment: datetime, policy: Policy) -> datetime:
    return moment.replace(hour=policy.default_hour, minute=0, second=0, microsecond=0)


def _matched_weekday(match: re.Match) -> int:
    name = match.group("weekday") or match.groupdict().get("weekday_after")
    return weekday_from_name(name)


def _day_after_tomorrow_at_hour(match: re.Match, reference: datetime, policy: Policy) -> datetime:
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    return (reference + timedelta(days=2)).replace(
        hour=hour, minute=minute, second=0, microsecond=0
    )


def _day_after_tomorrow(match: re.Match, reference: datetime, policy: Policy) -> datetime:
    return reference + timedelta(days=2)


def _weekday_next_week(match: re.Match, reference: datetime, policy: Policy) -> datetime:
    target = _matched_weekday(match)
    days_to_next_monday = (7 - reference.weekday()) % 7 or 7
    return _at_default_hour(
        reference + timedelta(days=days_to_next_monday + target), policy
    )


def _weekday_coming(match: re.Match, reference: datetime, policy: Policy) -> datetime:
    target = _matched_weekday(match)
    current = reference.weekday()

    if policy.weekend_skip and current == FRIDAY and target in (SATURDAY, SUNDAY):
        # Friday + "sábado/domingo que viene" → following Monday
        logger.info("Weekend skip: weekend target on a Friday moved to Monday")
        days_ahead = 3
    else:
        days_ahead = (target - current) % 7 or 7

    return _at_default_hour(reference + timedelta(days=days_ahead), policy)


_HOUR = r"(?P<hour>[01]?\d|2[0-3])(?:[:.h](?P<minute>[0-5]\d))?(?!\d)"
_DAY_AFTER_TOMORROW = r"(?:pasado\s+ma[ñn]ana|dem[àa]\s+passat)"
_WEEKDAY = rf"(?P<weekday>{WEEKDAY_ALTERNATION})"

PATTERN_RULES: list[PatternRule] = [
    PatternRule(
        name="day_after_tomorrow_at_hour",
        pattern=re.compile(rf"\b{_DAY_AFTER_TOMORROW}\s+a\s+l[ae]s?\s+{_HOUR}", re.IGNORECASE),
        resolver=_day_after_tomorrow_at_hour,
    ),
    PatternRule(
        name="day_after_tomorrow",
        pattern=re.compile(rf"\b{_DAY_AFTER_TOMORROW}\b", re.IGNORECASE),
        resolver=_day_after_tomorrow,
    ),
    PatternRule(
        name="weekday_next_week",
        pattern=re.compile(
            rf"\b{_WEEKDAY}\s+de\s+la\s+(?:"
            r"(?:semana|setmana)\s+(?:que\s+viene|que\s+ve|pr[óo]xima|vinent|propera|siguiente|seg[üu]ent)"
            r"|(?:pr[óo]xima|propera)\s+(?:semana|setmana))\b",
            re.IGNORECASE,
        ),
        resolver=_weekday_next_week,
    ),
    PatternRule(
        name="weekday_coming",
        pattern=re.compile(
            rf"\b(?:{_WEEKDAY}\s+(?:que\s+viene|que\s+ve|vinent)"
            rf"|(?:pr[óo]xim[oa]|proper)\s+(?P<weekday_after>{WEEKDAY_ALTERNATION}))\b",
            re.IGNORECASE,
        ),
        resolver=_weekday_coming,
    ),
]


def apply_patterns(
    expression: str,
    reference: datetime,
    policy: Policy,
    rules: list[PatternRule] | None = None,
) -> PatternMatch | None:
    """
    Evaluate the rule table top to bottom and resolve with the first match.

    Args:
        expression: Raw user expression
        reference: Aware reference datetime
        policy: Active correction policy
        rules: Rule table override (default: PATTERN_RULES)

    Returns:
        PatternMatch with the rule name and resolved moment, or None if no rule matched

    Example:
        Assuming reference = Tuesday 2025-11-04 09:00 Europe/Madrid:

        >>> apply_patterns("pasado mañana", reference, Policy()).moment
        datetime(2025, 11, 6, 9, 0, tzinfo=ZoneInfo('Europe/Madrid'))
    """
    text = expression.lower()
    for rule in rules if rules is not None else PATTERN_RULES:
        match = rule.pattern.search(text)
        if match is None:
            continue

        moment = rule.resolver(match, reference, policy)
        logger.info(
            f"Pattern rule matched | rule={rule.name} | expression='{expression}' "
            f"| result={moment.isoformat()}"
        )
        return PatternMatch(rule=rule.name, moment=moment)

    return None
