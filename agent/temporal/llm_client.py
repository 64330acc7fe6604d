"""
Generative model client shared by translation and date fallback.

One ChatOpenAI handle (OpenRouter) is built per process and injected into
the resolver. When no API key is configured the handle is None and every
model-backed step is skipped.
"""

import asyncio
import logging
import time
from functools import lru_cache
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from shared.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_llm_client() -> ChatOpenAI | None:
    """
    Get the shared LLM client, or None when OPENROUTER_API_KEY is not set.

    Temperature is 0: answers must be as repeatable as the provider allows.
    """
    settings = get_settings()

    if not settings.llm_enabled:
        logger.warning("OPENROUTER_API_KEY not configured - model translation and fallback disabled")
        return None

    return ChatOpenAI(
        model=settings.LLM_MODEL,
        api_key=settings.OPENROUTER_API_KEY,
        base_url=settings.OPENROUTER_BASE_URL,
        temperature=0,
        max_tokens=settings.LLM_MAX_TOKENS,
        request_timeout=settings.LLM_TIMEOUT_SECONDS,
        max_retries=1,
        default_headers={
            "HTTP-Referer": settings.SITE_URL,
            "X-Title": settings.SITE_NAME,
        },
    )


def clean_model_text(text: str) -> str:
    """Strip whitespace, code fences and wrapping quotes from a short model answer."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`").strip()
    return cleaned.strip("\"'“”«» \n\t")


async def invoke_model(
    llm: Any,
    system_prompt: str,
    user_prompt: str,
    timeout: float | None = None,
) -> str | None:
    """
    Invoke the model once and return its cleaned text answer.

    Transport errors and timeouts are logged and returned as None: a failing
    model means "fallback unavailable", never a failed request.

    Args:
        llm: Chat model exposing `ainvoke(messages)` (ChatOpenAI or a test stub)
        system_prompt: System message content
        user_prompt: Human message content
        timeout: Seconds to wait (default: settings.LLM_TIMEOUT_SECONDS)

    Returns:
        Cleaned answer text, or None on any failure
    """
    if llm is None:
        return None

    timeout = timeout if timeout is not None else get_settings().LLM_TIMEOUT_SECONDS
    start_time = time.time()

    try:
        response = await asyncio.wait_for(
            llm.ainvoke(
                [
                    SystemMessage(content=system_prompt),
                    HumanMessage(content=user_prompt),
                ]
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Model call timed out after {timeout:.1f}s")
        return None
    except Exception as e:
        latency_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Model call failed | error={str(e)} | latency={latency_ms:.0f}ms",
            exc_info=True,
        )
        return None

    content = response.content if isinstance(response.content, str) else str(response.content)
    latency_ms = (time.time() - start_time) * 1000
    logger.info(f"Model answered | latency={latency_ms:.0f}ms | answer='{content[:80]}'")

    return clean_model_text(content)
