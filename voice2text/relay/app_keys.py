"""Typed keys for values stored on the relay application."""

from pathlib import Path

from aiohttp import web

WEB_ROOT_KEY = web.AppKey("web_root", Path)
DEFAULT_DOCUMENT_KEY = web.AppKey("default_document", str)
VERIFY_UPSTREAM_TLS_KEY = web.AppKey("verify_upstream_tls", bool)
