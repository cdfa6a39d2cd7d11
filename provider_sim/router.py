"""Path-suffix routing.

Routes match on the end of the path so the simulator works behind any
reverse-proxy prefix (/openai/v1/chat/completions and /v1/chat/completions
both reach the completions handler). The table is evaluated in order and the
first match wins.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from aiohttp import web

from provider_sim import handlers

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@dataclass(frozen=True)
class Route:
    name: str
    suffixes: tuple[str, ...]
    handler: Handler
    requires_auth: bool = True

    def matches(self, path: str) -> bool:
        return path.endswith(self.suffixes)


ROUTES: tuple[Route, ...] = (
    Route("completions", ("/v1/chat/completions", "/v1/completions"), handlers.chat_completions),
    Route("models", ("/v1/models",), handlers.models),
    Route("health", ("/health", "/ready"), handlers.health, requires_auth=False),
)


def resolve(path: str, routes: tuple[Route, ...] = ROUTES) -> Route | None:
    """Return the first route whose suffix matches path, or None."""
    for route in routes:
        if route.matches(path):
            return route
    return None
