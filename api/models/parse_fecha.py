"""Pydantic models for the /parse-fecha endpoint."""

from pydantic import BaseModel, ConfigDict


class ParseFechaRequest(BaseModel):
    """
    Request body.

    Fields are optional at the schema level so that missing values are
    reported with the service's own 400 message instead of a schema error.
    """
    model_config = ConfigDict(extra="ignore")

    referencia: str | None = None  # ISO 8601 with offset, e.g. "2025-11-04T09:00:00+01:00"
    expresion_usuario: str | None = None
    zona_horaria: str | None = None  # IANA zone id, default settings.TIMEZONE


class ParseFechaResponse(BaseModel):
    """Resolved date, or "sin_definir" in every text field."""

    fecha_resuelta: str  # YYYY-MM-DD
    dia_semana: str
    hora: str  # HH:MM
    iso_datetime: str
    es_finde: bool
    es_pasado: bool


class ErrorResponse(BaseModel):
    """Error payload for validation, interpretation and unexpected failures."""

    error: bool = True
    mensaje: str
