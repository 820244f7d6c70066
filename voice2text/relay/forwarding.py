"""Forwarding endpoint: streams a POST through to a caller-chosen target URL.

The relay trusts its caller. It does not authenticate, limit, queue or retry.
Request and response bodies are streamed, never held whole in memory.

TLS: when ``relay.verify_upstream_tls`` is false (the default) certificate
verification is switched off for the outbound forward so self-signed local
webhooks can be reached. This is a deliberate security trade-off scoped to
this one request; nothing else in the process is affected.

There is no timeout on the upstream call. A hung upstream keeps that one
inbound connection open until either side gives up.
"""

import logging
from typing import Mapping

import aiohttp
from aiohttp import web
from multidict import CIMultiDict

from .app_keys import VERIFY_UPSTREAM_TLS_KEY
from ..errors import RelayBadRequest, RelayUpstreamFailure

logger = logging.getLogger(__name__)

EXCLUDED_REQUEST_HEADERS = frozenset({'host', 'connection', 'origin', 'referer'})
# The relay frames its own messages; these describe the other hop's framing.
FRAMING_HEADERS = frozenset({'transfer-encoding', 'connection', 'keep-alive'})
STREAM_CHUNK_SIZE = 64 * 1024


def sanitize_headers(headers: Mapping[str, str]) -> CIMultiDict:
    """Copy inbound headers minus Host, Connection, Origin and Referer."""
    return CIMultiDict([
        (name, value) for name, value in headers.items()
        if name.lower() not in EXCLUDED_REQUEST_HEADERS
    ])


def mirror_headers(headers: Mapping[str, str]) -> CIMultiDict:
    """Copy upstream response headers for the caller, keeping duplicates."""
    return CIMultiDict([
        (name, value) for name, value in headers.items()
        if name.lower() not in FRAMING_HEADERS
    ])


def upstream_ssl(target_url: str, verify_tls: bool) -> bool:
    """The ``ssl=`` argument for the outbound request.

    False turns verification off for this request only; True keeps aiohttp's
    default verification.
    """
    if target_url.lower().startswith('https') and not verify_tls:
        return False
    return True


async def forward_request(request: web.Request) -> web.StreamResponse:
    target_url = request.query.get('url', '').strip()
    if not target_url:
        raise RelayBadRequest()

    logger.info(f"[Proxy] Forwarding to: {target_url}")

    headers = sanitize_headers(request.headers)
    headers.popall('Transfer-Encoding', None)
    ssl = upstream_ssl(target_url, request.app[VERIFY_UPSTREAM_TLS_KEY])

    # One client session per forward: nothing is shared between requests.
    session = aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=None),
        auto_decompress=False,
    )
    try:
        try:
            upstream = await session.post(
                target_url,
                headers=headers,
                data=request.content,
                ssl=ssl,
                allow_redirects=False,
            )
        except (aiohttp.ClientError, OSError, ValueError) as e:
            reason = str(e) or e.__class__.__name__
            logger.error(f"[Proxy Error] {reason}")
            raise RelayUpstreamFailure(reason) from e

        async with upstream:
            response = web.StreamResponse(
                status=upstream.status,
                reason=upstream.reason,
                headers=mirror_headers(upstream.headers),
            )
            await response.prepare(request)
            try:
                async for chunk in upstream.content.iter_chunked(STREAM_CHUNK_SIZE):
                    await response.write(chunk)
            except aiohttp.ClientError as e:
                # Status line already sent; all we can do is drop this connection.
                logger.error(f"[Proxy Error] upstream body interrupted: {e}")
                raise
            await response.write_eof()
            logger.debug(f"[Proxy] {target_url} -> {upstream.status}")
            return response
    finally:
        await session.close()
