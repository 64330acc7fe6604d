"""
Temporal content classifier.

Decides whether an expression carries temporal content at all. Pure greetings
and courtesy phrases ("hola", "gracias", "bon dia") resolve to "sin_definir"
without ever reaching the date parser or the model.
"""

import logging
import re

from agent.temporal.lexicon import CATALAN_MONTHS, SPANISH_MONTHS, WEEKDAYS

logger = logging.getLogger(__name__)

# Curated bilingual keyword set. Any hit means temporal content is present,
# even when the expression also contains a greeting ("hola, el lunes").
TEMPORAL_KEYWORDS: set[str] = {
    *WEEKDAYS,
    *SPANISH_MONTHS,
    *CATALAN_MONTHS,
    # today / tomorrow / yesterday
    "hoy", "mañana", "manana", "ayer", "anteayer",
    "avui", "demà", "dema", "ahir", "abans-d'ahir",
    # week / month / year
    "semana", "semanas", "finde", "fin de semana", "mes", "meses", "año", "años",
    "setmana", "setmanes", "cap de setmana", "mesos", "any", "anys",
    # next / coming
    "próximo", "proximo", "próxima", "proxima", "que viene", "siguiente",
    "vinent", "proper", "propera", "que ve", "següent", "seguent",
    # hours
    "mediodía", "mediodia", "medianoche", "migdia", "mitjanit",
}

# Relative-count markers: "en 3 días", "dentro de dos semanas", "d'aquí a 2 dies"
RELATIVE_COUNT_PATTERN = re.compile(
    r"\b(?:en|dentro\s+de|d'aqu[íi]\s+a|daqu[íi]\s+a)\s+"
    r"(?:\d+|un|una|dos|tres|cuatro|cinco|seis|siete|quatre|cinc|sis|set)\s+"
    r"(?:d[íi]as?|dies|semanas?|setmanes|horas?|hores)\b"
)

_KEYWORD_PATTERN = re.compile(
    r"(?<![\w])(?:"
    + "|".join(re.escape(k) for k in sorted(TEMPORAL_KEYWORDS, key=len, reverse=True))
    + r")(?![\w])"
)

# Exact-match greetings and courtesy phrases (after lowercasing/trimming)
GREETINGS: set[str] = {
    # Spanish
    "hola", "holaa", "holaaa", "buenas", "buenos días", "buenos dias",
    "buenas tardes", "buenas noches", "hola buenas", "hola buenos días",
    "hola buenos dias", "gracias", "muchas gracias", "mil gracias", "vale",
    "ok", "okey", "de acuerdo", "perfecto", "adiós", "adios", "hasta luego",
    "un saludo", "saludos", "qué tal", "que tal", "hola qué tal", "hola que tal",
    # Catalan
    "bon dia", "bona tarda", "bona nit", "hola bon dia", "gràcies", "gracies",
    "moltes gràcies", "moltes gracies", "merci", "d'acord", "adéu", "adeu",
    "fins aviat", "fins després", "fins despres", "salutacions",
}


def _normalize(expression: str) -> str:
    return " ".join(expression.lower().strip().split())


def is_temporally_clear(expression: str) -> bool:
    """
    Check whether an expression may carry temporal content.

    Rules (in order):
    1. Any temporal keyword or relative-count marker → True
    2. Exact greeting/courtesy phrase (one trailing '.', '!' or '?' allowed) → False
    3. Anything else → True (later stages decide)

    Examples:
        >>> is_temporally_clear("Hola, ¿el lunes a las 10?")
        True
        >>> is_temporally_clear("Buenas tardes!")
        False
        >>> is_temporally_clear("15/11")
        True
    """
    text = _normalize(expression)

    if _KEYWORD_PATTERN.search(text) or RELATIVE_COUNT_PATTERN.search(text):
        return True

    candidate = text[:-1] if text[-1:] in {".", "!", "?"} else text
    candidate = candidate.lstrip("¡¿").strip()
    if candidate in GREETINGS:
        logger.info(f"Expression classified as greeting: '{expression}'")
        return False

    return True
