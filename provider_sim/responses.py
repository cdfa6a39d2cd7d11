"""OpenAI-compatible response bodies: chat completion, model list, health.

Content and token counts are cosmetic. They come from a Variability source so
tests can pin them; nothing is derived from the prompt.
"""

from __future__ import annotations

import json
import logging
import random
import time
import uuid
from collections.abc import Sequence
from typing import Any, Protocol

log = logging.getLogger(__name__)

OWNED_BY = "provider-sim"

CANNED_RESPONSES = (
    "Today it is partially cloudy and raining. Testing, testing 1,2,3",
    "The API key was validated successfully. This is a simulated response.",
    "Hello from the key-validating provider simulator!",
    "External model inference is working end-to-end with API key injection.",
)

PROMPT_TOKENS_RANGE = (1, 5)
COMPLETION_TOKENS_RANGE = (5, 24)


class Variability(Protocol):
    def completion_id(self) -> str: ...

    def prompt_tokens(self) -> int: ...

    def completion_tokens(self) -> int: ...

    def choose(self, options: Sequence[str]) -> str: ...


class RandomVariability:
    """Default source. SystemRandom reads from the OS and keeps no Python-level state."""

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def completion_id(self) -> str:
        return f"chatcmpl-{uuid.uuid4().hex[:24]}"

    def prompt_tokens(self) -> int:
        return self._rng.randint(*PROMPT_TOKENS_RANGE)

    def completion_tokens(self) -> int:
        return self._rng.randint(*COMPLETION_TOKENS_RANGE)

    def choose(self, options: Sequence[str]) -> str:
        return self._rng.choice(options)


def requested_model(body: str | bytes, default: str) -> str:
    """Return the body's "model" field, or default when it is unusable.

    Missing, undecodable, malformed, too deeply nested or non-object bodies
    and empty or non-string models all fall back silently. Bytes are decoded
    by json.loads itself, ignoring any declared charset.
    """
    if not body:
        return default
    try:
        parsed = json.loads(body)
    except (ValueError, RecursionError):
        log.debug("Unparseable completions body, using default model %s", default)
        return default
    if not isinstance(parsed, dict):
        return default
    model = parsed.get("model")
    if not isinstance(model, str) or not model:
        return default
    return model


def build_chat_completion(model: str, variability: Variability) -> dict[str, Any]:
    prompt_tokens = variability.prompt_tokens()
    completion_tokens = variability.completion_tokens()
    return {
        "id": variability.completion_id(),
        "created": int(time.time()),
        "model": model,
        "object": "chat.completion",
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {
                    "role": "assistant",
                    "content": variability.choose(CANNED_RESPONSES),
                },
            }
        ],
    }


def build_model_list(model: str) -> dict[str, Any]:
    return {
        "object": "list",
        "data": [
            {
                "id": model,
                "object": "model",
                "created": int(time.time()),
                "owned_by": OWNED_BY,
                "ready": True,
            }
        ],
    }


def build_health() -> dict[str, str]:
    return {"status": "healthy"}
