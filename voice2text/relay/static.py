"""Static asset endpoint: serves the client files from the web root."""

import asyncio
import errno
import logging
from pathlib import Path
from typing import Optional

from aiohttp import web

from .app_keys import DEFAULT_DOCUMENT_KEY, WEB_ROOT_KEY

logger = logging.getLogger(__name__)

MIME_TYPES = {
    '.html': 'text/html',
    '.css': 'text/css',
    '.js': 'text/javascript',
    '.json': 'application/json',
    '.png': 'image/png',
    '.svg': 'image/svg+xml',
}
DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def content_type_for(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_asset_path(web_root: Path, request_path: str, default_document: str = 'index.html') -> Optional[Path]:
    """Map a URL path to a file under ``web_root``.

    Returns None when the path would land outside the web root or cannot name
    a file at all (embedded NUL).
    """
    relative = request_path.split('?', 1)[0].lstrip('/')
    if not relative:
        relative = default_document
    if '\x00' in relative:
        return None

    root = web_root.resolve()
    try:
        candidate = (root / relative).resolve()
    except ValueError:
        return None
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


async def serve_static(request: web.Request) -> web.Response:
    file_path = resolve_asset_path(
        request.app[WEB_ROOT_KEY],
        request.path,
        request.app[DEFAULT_DOCUMENT_KEY],
    )
    if file_path is None:
        logger.warning(f"Rejected asset path: {request.path!r}")
        return web.Response(status=404, text='File not found')

    loop = asyncio.get_running_loop()
    try:
        content = await loop.run_in_executor(None, file_path.read_bytes)
    except FileNotFoundError:
        return web.Response(status=404, text='File not found')
    except OSError as e:
        code = errno.errorcode.get(e.errno, 'UNKNOWN') if e.errno else 'UNKNOWN'
        logger.error(f"Failed to read {file_path}: {e}")
        return web.Response(status=500, text=f'Server Error: {code}')

    return web.Response(body=content, headers={'Content-Type': content_type_for(file_path)})
