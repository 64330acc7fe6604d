"""Spanish/Catalan language detection from lexical markers."""

import re

from agent.temporal.lexicon import CATALAN_MONTHS, CATALAN_WEEKDAYS
from agent.temporal.models import Language

# Words shared with Spanish ("que ve", "tarda", "les", "marc") are not markers
CATALAN_MARKERS: list[str] = [
    *CATALAN_WEEKDAYS,
    *CATALAN_MONTHS,
    "demà", "avui", "ahir", "setmana", "setmanes", "any", "anys",
    "vinent", "propera", "proper", "dies", "matí",
]

# Whole-word match: "agosto" must not hit the Catalan "agost"
_MARKER_PATTERN = re.compile(
    r"(?<![\w])(?:"
    + "|".join(re.escape(m) for m in sorted(CATALAN_MARKERS, key=len, reverse=True))
    + r")(?![\w])"
)


def detect_language(expression: str) -> Language:
    """
    Choose Catalan when any Catalan marker word appears, Spanish otherwise.

    Examples:
        >>> detect_language("dimarts vinent")
        <Language.CATALAN: 'ca'>
        >>> detect_language("el 3 de agosto")
        <Language.SPANISH: 'es'>
    """
    if _MARKER_PATTERN.search(expression.lower()):
        return Language.CATALAN
    return Language.SPANISH
