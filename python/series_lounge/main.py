"""Process entrypoint: build, configure and serve the application.

Run with: series-lounge  (or python -m series_lounge.main)

Start-up failures (port already bound, bad settings) are not caught; they end
the process.
"""

import asyncio
import ipaddress

import uvicorn
from fastapi import FastAPI

from series_lounge.app import configure_app, create_application
from series_lounge.config import Settings, get_settings
from series_lounge.logging import configure_logging, get_logger

logger = get_logger(__name__)

STARTUP_POLL_INTERVAL_S = 0.05


def resolve_base_url(host: str, port: int, scheme: str = "http") -> str:
    """Return the URL clients on this machine can reach for a bound address.

    Wildcard addresses map to loopback; IPv6 literals are bracketed.
    """
    if host in ("", "0.0.0.0"):
        host = "127.0.0.1"
    elif host == "::":
        host = "::1"

    try:
        is_ipv6 = ipaddress.ip_address(host).version == 6
    except ValueError:
        is_ipv6 = False

    if is_ipv6:
        host = f"[{host}]"
    return f"{scheme}://{host}:{port}"


def bound_address(server: uvicorn.Server, settings: Settings) -> tuple[str, int]:
    """Return (host, port) of the first listening socket, else the configured ones."""
    for srv in getattr(server, "servers", None) or []:
        for sock in srv.sockets:
            host, port = sock.getsockname()[:2]
            return host, port
    return settings.host, settings.listen_port


def create_server(app: FastAPI, settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.listen_port,
        log_config=None,
    )
    return uvicorn.Server(config)


async def bootstrap(settings: Settings | None = None) -> None:
    """Create, configure and serve the application until shutdown."""
    settings = settings or get_settings()

    app = create_application(settings=settings, raw_body=True)
    configure_app(app)

    logger.info("configuration_loaded", port=settings.port)
    port = settings.listen_port

    server = create_server(app, settings)
    serving = asyncio.create_task(server.serve())

    while not server.started:
        if serving.done():
            # Start-up failed; surface the error or exit code
            await serving
            return
        await asyncio.sleep(STARTUP_POLL_INTERVAL_S)

    logger.info("app_listening", port=port)
    host, bound_port = bound_address(server, settings)
    logger.info("app_running", url=resolve_base_url(host, bound_port))

    await serving


def run() -> None:
    """Console script entrypoint."""
    settings = get_settings()
    configure_logging(json_format=settings.json_logs, level=settings.log_level)
    asyncio.run(bootstrap(settings))


if __name__ == "__main__":
    run()
