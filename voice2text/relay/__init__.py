"""Relay server: forwards browser uploads to local webhooks."""

from .forwarding import forward_request, sanitize_headers, mirror_headers, upstream_ssl
from .server import create_app, run_relay, CORS_HEADERS
from .static import serve_static, resolve_asset_path, content_type_for, MIME_TYPES

__all__ = [
    "create_app",
    "run_relay",
    "CORS_HEADERS",
    "forward_request",
    "sanitize_headers",
    "mirror_headers",
    "upstream_ssl",
    "serve_static",
    "resolve_asset_path",
    "content_type_for",
    "MIME_TYPES",
]
