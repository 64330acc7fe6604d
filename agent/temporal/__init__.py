"""
Temporal expression resolution for Spanish and Catalan.

Public exports:
    - TemporalResolver: Full resolution pipeline
    - ResolutionRequest: Validated request (expression, reference, zone)
    - Policy: Correction policy flags
    - Resolved / Undefined / Unresolved: Resolution outcomes
    - assemble: Outcome → /parse-fecha response fields
    - get_llm_client: Shared model client factory (None without API key)
"""

from agent.temporal.assembler import assemble
from agent.temporal.llm_client import get_llm_client
from agent.temporal.models import (
    InvalidRequestError,
    Language,
    Outcome,
    Policy,
    ResolutionRequest,
    Resolved,
    ResolvedMoment,
    Stage,
    Undefined,
    Unresolved,
)
from agent.temporal.pipeline import TemporalResolver

__all__ = [
    "InvalidRequestError",
    "Language",
    "Outcome",
    "Policy",
    "ResolutionRequest",
    "Resolved",
    "ResolvedMoment",
    "Stage",
    "TemporalResolver",
    "Undefined",
    "Unresolved",
    "assemble",
    "get_llm_client",
]
