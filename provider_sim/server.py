"""aiohttp application: one catch-all route dispatched by path suffix."""

from __future__ import annotations

import logging

from aiohttp import web

from provider_sim.auth import check_key
from provider_sim.config import InstanceConfig
from provider_sim.handlers import INSTANCE_KEY, VARIABILITY_KEY
from provider_sim.responses import RandomVariability, Variability
from provider_sim.router import resolve

log = logging.getLogger(__name__)

# Completions bodies are read whole; aiohttp otherwise caps them at 1 MiB.
MAX_BODY_BYTES = 64 * 1024 * 1024


async def dispatch(request: web.Request) -> web.StreamResponse:
    route = resolve(request.path)
    if route is None:
        raise web.HTTPNotFound()

    if route.requires_auth:
        error = check_key(request.headers, request.app[INSTANCE_KEY].api_key)
        if error is not None:
            log.info(
                "Rejected %s %s (%s): %s",
                request.method,
                request.path,
                route.name,
                error.message,
            )
            return web.json_response(error.to_dict(), status=error.status)

    return await route.handler(request)


def create_app(
    instance: InstanceConfig, variability: Variability | None = None
) -> web.Application:
    app = web.Application(client_max_size=MAX_BODY_BYTES)
    app[INSTANCE_KEY] = instance
    app[VARIABILITY_KEY] = variability or RandomVariability()

    async def on_startup(app: web.Application) -> None:
        log.info(
            "Starting provider-sim on %s:%d (model=%s, key-validation=enabled)",
            instance.host,
            instance.port,
            instance.model,
        )

    app.on_startup.append(on_startup)

    app.router.add_route("*", "/{tail:.*}", dispatch)
    return app
