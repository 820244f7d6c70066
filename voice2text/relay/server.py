"""Relay HTTP server: static client assets plus the /proxy forwarding endpoint."""

import logging
from typing import Optional

from aiohttp import web

from .app_keys import DEFAULT_DOCUMENT_KEY, VERIFY_UPSTREAM_TLS_KEY, WEB_ROOT_KEY
from .forwarding import forward_request
from .static import serve_static
from ..config import Voice2TextConfig
from ..errors import RelayError

logger = logging.getLogger(__name__)

PROXY_PATH = '/proxy'
DEFAULT_PORT = 3000

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Answer preflight requests for any path before routing."""
    if request.method == 'OPTIONS':
        return web.Response(status=204)
    return await handler(request)


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Turn relay errors into JSON ``{"error": ...}`` responses."""
    try:
        return await handler(request)
    except RelayError as e:
        return web.json_response({'error': e.message}, status=e.status)


async def add_cors_headers(request: web.Request, response: web.StreamResponse) -> None:
    response.headers.update(CORS_HEADERS)


def create_app(config: Voice2TextConfig) -> web.Application:
    """Build the relay application from configuration."""
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app[WEB_ROOT_KEY] = config.get_web_root()
    app[DEFAULT_DOCUMENT_KEY] = config.get('relay.default_document', 'index.html')
    app[VERIFY_UPSTREAM_TLS_KEY] = bool(config.get('relay.verify_upstream_tls', False))

    if not app[VERIFY_UPSTREAM_TLS_KEY]:
        logger.warning("Upstream TLS verification is disabled for forwarded requests")

    app.router.add_post(PROXY_PATH, forward_request)
    app.router.add_get('/{path:.*}', serve_static)
    app.on_response_prepare.append(add_cors_headers)

    logger.info(f"Relay app created, serving {app[WEB_ROOT_KEY]}")
    return app


def run_relay(config: Voice2TextConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the relay until interrupted."""
    host = host or config.get('relay.host', '0.0.0.0')
    port = int(port or config.get('relay.port', DEFAULT_PORT))
    app = create_app(config)

    logger.info(f"Relay listening on {host}:{port}")
    print(f"Server running at http://localhost:{port}/")
    if not app[VERIFY_UPSTREAM_TLS_KEY]:
        print("Use this address to open the app (upstream TLS verification relaxed).")
    web.run_app(app, host=host, port=port, print=None)
