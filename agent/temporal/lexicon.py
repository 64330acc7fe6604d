"""
Bilingual (Spanish/Catalan) calendar vocabulary.

Weekday and month tables shared by the classifier, the language detector,
the pattern rules and the result assembler, plus weekday-name rendering
in the detected language.
"""

from datetime import datetime

from agent.temporal.models import Language

# Weekday names as rendered in responses (index = datetime.weekday())
WEEKDAY_NAMES: dict[Language, list[str]] = {
    Language.SPANISH: [
        "lunes",
        "martes",
        "miércoles",
        "jueves",
        "viernes",
        "sábado",
        "domingo",
    ],
    Language.CATALAN: [
        "dilluns",
        "dimarts",
        "dimecres",
        "dijous",
        "divendres",
        "dissabte",
        "diumenge",
    ],
}

# Weekend names per language, with and without diacritics
WEEKEND_NAMES: dict[Language, set[str]] = {
    Language.SPANISH: {"sábado", "sabado", "domingo"},
    Language.CATALAN: {"dissabte", "diumenge"},
}

# Spanish weekday mappings for parsing
SPANISH_WEEKDAYS = {
    "lunes": 0,
    "martes": 1,
    "miércoles": 2,
    "miercoles": 2,  # Without accent
    "jueves": 3,
    "viernes": 4,
    "sábado": 5,
    "sabado": 5,  # Without accent
    "domingo": 6,
}

# Catalan weekday mappings for parsing
CATALAN_WEEKDAYS = {
    "dilluns": 0,
    "dimarts": 1,
    "dimecres": 2,
    "dijous": 3,
    "divendres": 4,
    "dissabte": 5,
    "diumenge": 6,
}

WEEKDAYS: dict[str, int] = {**SPANISH_WEEKDAYS, **CATALAN_WEEKDAYS}

# Regex alternation matching any weekday name in either language
WEEKDAY_ALTERNATION = "|".join(sorted(WEEKDAYS, key=len, reverse=True))

SPANISH_MONTHS = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "setiembre", "octubre", "noviembre", "diciembre",
]

# Only the Catalan month names that are not also Spanish words
CATALAN_MONTHS = [
    "gener", "febrer", "març", "maig", "juny",
    "juliol", "agost", "setembre", "novembre", "desembre",
]


def weekday_from_name(name: str) -> int:
    """
    Map a Spanish or Catalan weekday name to datetime.weekday() numbering.

    Raises:
        KeyError: If the name is not a known weekday
    """
    return WEEKDAYS[name.strip().lower()]


def get_weekday_name(date: datetime, language: Language = Language.SPANISH) -> str:
    """
    Get the lowercase weekday name for a date in the given language.

    Example:
        >>> get_weekday_name(datetime(2025, 11, 7), Language.CATALAN)
        'divendres'
    """
    return WEEKDAY_NAMES[language][date.weekday()]


def is_weekend_name(weekday_name: str, language: Language) -> bool:
    """Case-insensitive substring match against the language's weekend names."""
    lowered = weekday_name.lower()
    return any(name in lowered for name in WEEKEND_NAMES[language])
