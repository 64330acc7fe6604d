"""
Temporal resolver - composes the resolution stages in a fixed order.

    Classifier ──(no content)──────────────────────────────► Undefined
        │
    LanguageDetector
        │
    PatternPreprocessor ──(rule matched)───────────────────► Resolved(pattern)
        │
    BaseParserAdapter ──(no candidate)──► FallbackResolver ─► Resolved(fallback) | Undefined | Unresolved
        │
    RuleCorrector ──(still past + model)──► FallbackResolver ─► Resolved(fallback) or keep corrected
        │
    Resolved(parser | corrected)

Each request runs this pipeline once, sequentially. The only shared state is
the frozen Policy and the injected model client.
"""

import logging
from typing import Any

from agent.temporal.base_parser import BaseParserAdapter, ParseFunc, dateparser_parse
from agent.temporal.classifier import is_temporally_clear
from agent.temporal.corrector import correct
from agent.temporal.fallback import FallbackResolver
from agent.temporal.language import detect_language
from agent.temporal.models import (
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
from agent.temporal.patterns import apply_patterns

logger = logging.getLogger(__name__)


class TemporalResolver:
    """Resolves free-text Spanish/Catalan temporal expressions."""

    def __init__(
        self,
        policy: Policy | None = None,
        llm: Any = None,
        parse_func: ParseFunc = dateparser_parse,
        llm_timeout: float | None = None,
    ):
        self.policy = policy or Policy()
        self.base_parser = BaseParserAdapter(parse_func=parse_func, llm=llm, llm_timeout=llm_timeout)
        self.fallback = FallbackResolver(llm=llm, policy=self.policy, timeout=llm_timeout)

    async def _fallback_outcome(
        self, request: ResolutionRequest, language: Language
    ) -> Outcome | None:
        answer = await self.fallback.resolve_with_model(
            request.expression, request.reference, request.timezone
        )
        if answer is None:
            return None
        if isinstance(answer, Undefined):
            return answer
        return Resolved(ResolvedMoment(moment=answer, stage=Stage.FALLBACK, language=language))

    async def resolve(self, request: ResolutionRequest) -> Outcome:
        """
        Run the full pipeline for one request.

        Args:
            request: Validated resolution request

        Returns:
            Resolved, Undefined or Unresolved
        """
        expression = request.expression
        log_extra = {"expression": expression}

        if not is_temporally_clear(expression):
            logger.info("No temporal content, skipping parser and model", extra=log_extra)
            return Undefined()

        language = detect_language(expression)
        log_extra["language"] = language.value

        pattern = apply_patterns(expression, request.reference, self.policy)
        if pattern is not None:
            logger.debug(
                f"Pattern rule {pattern.rule} matched", extra={**log_extra, "stage": Stage.PATTERN.value}
            )
            return Resolved(
                ResolvedMoment(moment=pattern.moment, stage=Stage.PATTERN, language=language)
            )

        candidate = await self.base_parser.parse(expression, request.reference, language)
        if candidate is None:
            logger.info("Base parser found no date, trying model fallback", extra=log_extra)
            outcome = await self._fallback_outcome(request, language)
            return outcome if outcome is not None else Unresolved()

        correction = correct(candidate, request.reference, expression, self.policy)
        stage = Stage.CORRECTED if correction.changed else Stage.PARSER
        resolved = Resolved(
            ResolvedMoment(moment=correction.moment, stage=stage, language=language)
        )

        if correction.moment < request.reference and self.fallback.available:
            logger.info(
                f"Corrected candidate {correction.moment.isoformat()} is still past, "
                f"retrying with model fallback",
                extra=log_extra,
            )
            retry = await self._fallback_outcome(request, language)
            # The parser already found a date: a sentinel answer does not discard it
            if isinstance(retry, Resolved):
                return retry

        logger.debug(
            f"Resolved to {correction.moment.isoformat()}", extra={**log_extra, "stage": stage.value}
        )
        return resolved
