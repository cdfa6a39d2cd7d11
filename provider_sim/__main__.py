"""provider-sim entry point: start aiohttp server."""

import logging
import sys

from provider_sim.config import (
    StartupConfigError,
    build_instance_config,
    build_parser,
    load_config,
)
from provider_sim.server import create_app

log = logging.getLogger("provider_sim")


def main(argv: list[str] | None = None) -> None:
    from aiohttp import web

    args = build_parser().parse_args(argv)
    config = load_config(args.config, args)

    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        instance = build_instance_config(config)
    except StartupConfigError as exc:
        log.critical("%s", exc)
        sys.exit(1)

    app = create_app(instance)
    try:
        web.run_app(app, host=instance.host, port=instance.port, print=None)
    except OSError as exc:
        log.critical("Failed to listen on %s:%d: %s", instance.host, instance.port, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
