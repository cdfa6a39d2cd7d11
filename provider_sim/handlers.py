"""Endpoint handlers. Each one is a stateless function of (config, request)."""

from __future__ import annotations

from aiohttp import web

from provider_sim.config import InstanceConfig
from provider_sim.responses import (
    Variability,
    build_chat_completion,
    build_health,
    build_model_list,
    requested_model,
)

INSTANCE_KEY = web.AppKey("instance", InstanceConfig)
VARIABILITY_KEY = web.AppKey("variability", Variability)


async def chat_completions(request: web.Request) -> web.Response:
    instance = request.app[INSTANCE_KEY]
    body = await request.read() if request.can_read_body else b""
    model = requested_model(body, instance.model)
    return web.json_response(build_chat_completion(model, request.app[VARIABILITY_KEY]))


async def models(request: web.Request) -> web.Response:
    return web.json_response(build_model_list(request.app[INSTANCE_KEY].model))


async def health(request: web.Request) -> web.Response:
    return web.json_response(build_health())
