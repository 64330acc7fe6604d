"""
Base parser adapter - general natural-language date parsing.

Wraps the `dateparser` library. Spanish expressions are parsed directly.
Catalan expressions go through up to three attempts, the first success wins:
    1. Direct parse with Catalan and Spanish enabled
    2. Word substitution (Catalan → Spanish table) and Spanish parse
    3. Model translation into Spanish (only when a model is configured)
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable
from zoneinfo import ZoneInfo

import dateparser
from dateparser.search import search_dates

from agent.temporal.lexicon import WEEKDAY_ALTERNATION, weekday_from_name
from agent.temporal.llm_client import invoke_model
from agent.temporal.models import Language

logger = logging.getLogger(__name__)

# fn(text, reference, languages) -> aware datetime | None
ParseFunc = Callable[[str, datetime, list[str]], datetime | None]

# Ordered Catalan → Spanish substitutions (multi-word phrases first)
CATALAN_TO_SPANISH: list[tuple[str, str]] = [
    (r"dem[àa] passat", "pasado mañana"),
    (r"abans d'ahir", "anteayer"),
    (r"d'aqu[íi] a", "dentro de"),
    (r"la setmana que ve", "la semana que viene"),
    (r"la setmana vinent", "la semana que viene"),
    (r"la propera setmana", "la próxima semana"),
    (r"cap de setmana", "fin de semana"),
    (r"que ve", "que viene"),
    (r"del mat[íi]", "de la mañana"),
    (r"de la tarda", "de la tarde"),
    (r"de la nit", "de la noche"),
    (r"a les", "a las"),
    (r"dilluns", "lunes"),
    (r"dimarts", "martes"),
    (r"dimecres", "miércoles"),
    (r"dijous", "jueves"),
    (r"divendres", "viernes"),
    (r"dissabte", "sábado"),
    (r"diumenge", "domingo"),
    (r"dem[àa]", "mañana"),
    (r"avui", "hoy"),
    (r"ahir", "ayer"),
    (r"setmanes", "semanas"),
    (r"setmana", "semana"),
    (r"vinent", "que viene"),
    (r"propera", "próxima"),
    (r"proper", "próximo"),
    (r"migdia", "mediodía"),
    (r"mitjanit", "medianoche"),
    (r"mat[íi]", "mañana"),
    (r"tarda", "tarde"),
    (r"nit", "noche"),
    (r"dies", "días"),
    (r"dia", "día"),
    (r"hores", "horas"),
    (r"anys", "años"),
    (r"any", "año"),
    (r"gener", "enero"),
    (r"febrer", "febrero"),
    (r"març", "marzo"),
    (r"maig", "mayo"),
    (r"juny", "junio"),
    (r"juliol", "julio"),
    (r"agost", "agosto"),
    (r"setembre", "septiembre"),
    (r"novembre", "noviembre"),
    (r"desembre", "diciembre"),
]

_SUBSTITUTIONS = [
    (re.compile(rf"(?<![\w']){pattern}(?![\w])", re.IGNORECASE), replacement)
    for pattern, replacement in CATALAN_TO_SPANISH
]

# "a las 7", "a les 9:30", "a la 1 de la tarde" → clock time dateparser reads as a time.
# Without this, dateparser drops the hour or reads the bare number as a month.
HOUR_PHRASE_PATTERN = re.compile(
    r"\ba\s+l(?:a|as|es)\s+(?P<hour>[01]?\d|2[0-3])(?:[:.h](?P<minute>[0-5]\d))?(?!\d)(?:\s*h\b)?"
    r"(?:\s+(?:(?:de|por|a)\s+la|del|al|pel)\s+"
    r"(?P<period>ma[ñn]ana|madrugada|matinada|mat[íi]|tarde|noche|tarda|nit|vespre))?"
)

AFTERNOON_PERIODS = {"tarde", "noche", "tarda", "nit", "vespre"}

LEADING_ARTICLE_PATTERN = re.compile(
    rf"\b(?:el|este|esta|aquest|aquell)\s+(?=(?:{WEEKDAY_ALTERNATION})\b)"
)

NAMED_WEEKDAY_PATTERN = re.compile(rf"(?<![\w])(?:{WEEKDAY_ALTERNATION})(?![\w])")

TRANSLATION_SYSTEM_PROMPT = (
    "Eres un traductor de catalán a castellano. Responde SOLO con la traducción, "
    "sin comillas ni explicaciones."
)


def translate_catalan_words(expression: str) -> str:
    """
    Replace Catalan temporal words with their Spanish equivalents.

    Example:
        >>> translate_catalan_words("dimarts que ve a les 10")
        'martes que viene a las 10'
    """
    text = expression.lower()
    for pattern, replacement in _SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


def _clock_time(match: re.Match) -> str:
    hour = int(match.group("hour"))
    minute = match.group("minute") or "00"
    if match.group("period") in AFTERNOON_PERIODS and hour < 12:
        hour += 12
    return f"{hour}:{minute}"


def normalize_for_parser(text: str) -> str:
    """
    Rewrite hour phrases as clock times and drop articles before weekdays.

    Example:
        >>> normalize_for_parser("el viernes a las 7 de la tarde")
        'viernes 19:00'
    """
    normalized = HOUR_PHRASE_PATTERN.sub(_clock_time, text.lower())
    normalized = LEADING_ARTICLE_PATTERN.sub("", normalized)
    return " ".join(normalized.split())


def names_other_weekday(text: str, candidate: datetime) -> bool:
    """True when the text names exactly one weekday and the candidate falls on another."""
    named = {weekday_from_name(name) for name in NAMED_WEEKDAY_PATTERN.findall(text.lower())}
    return len(named) == 1 and candidate.weekday() not in named


def dateparser_parse(text: str, reference: datetime, languages: list[str]) -> datetime | None:
    """
    Parse `text` relative to `reference` with dateparser.

    The whole string is tried first; if it is not a date on its own, the first
    date embedded in it is used ("quiero cita el 20 de noviembre").

    Returns:
        Aware datetime in the reference's zone, or None
    """
    zone = reference.tzinfo
    zone_name = getattr(zone, "key", None) or "UTC"
    settings: dict[str, Any] = {
        "RELATIVE_BASE": reference.replace(tzinfo=None),
        "TIMEZONE": zone_name,
        "RETURN_AS_TIMEZONE_AWARE": True,
        "PREFER_DATES_FROM": "future",
    }

    text = normalize_for_parser(text)
    parsed = dateparser.parse(text, languages=languages, settings=settings)
    if parsed is None:
        found = search_dates(text, languages=languages, settings=settings)
        if found:
            parsed = found[0][1]

    if parsed is None:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=zone)
    return parsed.astimezone(zone if zone is not None else ZoneInfo("UTC"))


class BaseParserAdapter:
    """Natural-language date parsing with Catalan pre-translation."""

    def __init__(
        self,
        parse_func: ParseFunc = dateparser_parse,
        llm: Any = None,
        llm_timeout: float | None = None,
    ):
        self.parse_func = parse_func
        self.llm = llm
        self.llm_timeout = llm_timeout

    def _try_parse(self, text: str, reference: datetime, languages: list[str]) -> datetime | None:
        try:
            candidate = self.parse_func(text, reference, languages)
        except Exception as e:
            # Parser failures are "no candidate", never a failed request
            logger.warning(f"Date parser raised on '{text}': {e}")
            return None

        if candidate is not None and names_other_weekday(text, candidate):
            logger.debug(f"Discarding {candidate.isoformat()}: weekday differs from '{text}'")
            return None
        return candidate

    async def _translate_with_model(self, expression: str) -> str | None:
        return await invoke_model(
            self.llm,
            TRANSLATION_SYSTEM_PROMPT,
            f"Traduce al castellano esta expresión temporal: {expression}",
            timeout=self.llm_timeout,
        )

    async def parse(
        self, expression: str, reference: datetime, language: Language
    ) -> datetime | None:
        """
        Parse an expression into a candidate datetime.

        Args:
            expression: Raw user expression
            reference: Aware reference datetime
            language: Detected language

        Returns:
            Aware candidate datetime, or None if every attempt failed
        """
        if language == Language.SPANISH:
            return self._try_parse(expression, reference, ["es"])

        candidate = self._try_parse(expression, reference, ["ca", "es"])
        if candidate is not None:
            logger.debug(f"Catalan expression parsed directly: '{expression}'")
            return candidate

        substituted = translate_catalan_words(expression)
        candidate = self._try_parse(substituted, reference, ["es"])
        if candidate is not None:
            logger.info(f"Catalan expression parsed after substitution: '{substituted}'")
            return candidate

        if self.llm is None:
            return None

        translated = await self._translate_with_model(expression)
        if not translated:
            return None

        logger.info(f"Catalan expression translated by model: '{expression}' → '{translated}'")
        return self._try_parse(translated, reference, ["es"])
