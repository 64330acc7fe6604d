"""
Data models for temporal expression resolution.

This module defines the core data structures shared by every stage:
- Language: Languages the resolver understands
- Stage: Which stage produced a resolved moment
- Policy: Read-only correction policy (built once from settings)
- ResolutionRequest: One validated request (expression + reference + zone)
- ResolvedMoment: Concrete zoned datetime plus provenance
- Resolved / Undefined / Unresolved: Tagged outcome of a resolution
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shared.config import Settings, get_settings


class InvalidRequestError(ValueError):
    """Raised when the request values cannot be used as pipeline input."""

    pass


class Language(str, Enum):
    """Languages recognized by the resolver."""

    SPANISH = "es"
    CATALAN = "ca"


class Stage(str, Enum):
    """Pipeline stage that produced a resolved moment."""

    PATTERN = "pattern"  # PatternPreprocessor rule
    PARSER = "parser"  # dateparser output, no correction applied
    CORRECTED = "corrected"  # dateparser output changed by RuleCorrector
    FALLBACK = "fallback"  # Generative model answer


@dataclass(frozen=True)
class Policy:
    """
    Correction policy for date/hour normalization.

    Every rule is an independent flag so deployments can enable any subset.
    Weekdays use Python numbering (0=Monday ... 6=Sunday).
    """

    weekend_skip: bool = True
    default_hour: int = 12
    morning_window_weekday: int | None = None
    ambiguous_hour_pm_threshold: int = 8
    correct_past_weekdays: bool = True
    assign_default_hour: bool = True
    promote_ambiguous_hours: bool = True

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Policy":
        """Build the process-wide policy from POLICY_* settings."""
        settings = settings or get_settings()
        return cls(
            weekend_skip=settings.POLICY_WEEKEND_SKIP,
            default_hour=settings.POLICY_DEFAULT_HOUR,
            morning_window_weekday=settings.POLICY_MORNING_WINDOW_WEEKDAY,
            ambiguous_hour_pm_threshold=settings.POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD,
            correct_past_weekdays=settings.POLICY_CORRECT_PAST_WEEKDAYS,
            assign_default_hour=settings.POLICY_ASSIGN_DEFAULT_HOUR,
            promote_ambiguous_hours=settings.POLICY_PROMOTE_AMBIGUOUS_HOURS,
        )


@dataclass(frozen=True)
class ResolutionRequest:
    """A single resolution call: raw expression, reference instant and zone."""

    expression: str
    reference: datetime  # Always aware, expressed in `timezone`
    timezone: str

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_raw(
        cls,
        referencia: str | None,
        expresion_usuario: str | None,
        zona_horaria: str | None = None,
    ) -> "ResolutionRequest":
        """
        Validate wire values and build a request.

        Args:
            referencia: ISO 8601 reference datetime (offset expected)
            expresion_usuario: Free-text expression to resolve
            zona_horaria: IANA zone id (default: settings.TIMEZONE)

        Returns:
            ResolutionRequest with the reference converted into the zone

        Raises:
            InvalidRequestError: Missing values, unparseable reference or unknown zone

        Example:
            >>> req = ResolutionRequest.from_raw(
            ...     "2025-11-04T09:00:00+01:00", "pasado mañana", "Europe/Madrid"
            ... )
            >>> req.reference.isoformat()
            '2025-11-04T09:00:00+01:00'
        """
        if not referencia or not expresion_usuario or not expresion_usuario.strip():
            raise InvalidRequestError(
                "Faltan parámetros requeridos: referencia y expresion_usuario."
            )

        zone_name = zona_horaria or get_settings().TIMEZONE
        try:
            zone = ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise InvalidRequestError(f"Zona horaria inválida: {zone_name}") from e

        try:
            parsed = datetime.fromisoformat(referencia.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidRequestError("Referencia inválida.") from e

        # Naive references are wall time in the requested zone
        if parsed.tzinfo is None:
            reference = parsed.replace(tzinfo=zone)
        else:
            reference = parsed.astimezone(zone)

        return cls(
            expression=expresion_usuario.strip(),
            reference=reference,
            timezone=zone_name,
        )


@dataclass(frozen=True)
class ResolvedMoment:
    """Concrete zoned datetime plus the stage and language that produced it."""

    moment: datetime
    stage: Stage
    language: Language = Language.SPANISH


@dataclass(frozen=True)
class Resolved:
    """Outcome: a date was produced."""

    value: ResolvedMoment


@dataclass(frozen=True)
class Undefined:
    """Outcome: the expression has no temporal content (greeting, courtesy)."""

    pass


@dataclass(frozen=True)
class Unresolved:
    """Outcome: temporal content present but no stage produced a date."""

    pass


Outcome = Resolved | Undefined | Unresolved
