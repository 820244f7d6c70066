"""Integration tests for the relay: forwarding, CORS and static assets over real sockets."""

import gzip
import hashlib
import json
import ssl

import pytest
import pytest_asyncio
import trustme
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer, unused_port

from voice2text.relay.server import CORS_HEADERS, create_app


async def echo_handler(request):
    body = await request.read()
    return web.Response(
        status=201,
        body=body,
        headers={'X-Foo': 'bar', 'Content-Type': 'application/octet-stream'},
    )


async def headers_handler(request):
    return web.json_response({name: value for name, value in request.headers.items()})


async def digest_handler(request):
    digest = hashlib.sha256()
    size = 0
    async for chunk in request.content.iter_chunked(65536):
        digest.update(chunk)
        size += len(chunk)
    return web.json_response({'size': size, 'sha256': digest.hexdigest()})


async def redirect_handler(request):
    return web.Response(status=302, headers={'Location': 'http://127.0.0.1:1/elsewhere'})


GZIPPED = gzip.compress(b'{"text": "compressed hello"}')


async def gzip_handler(request):
    await request.read()
    return web.Response(
        body=GZIPPED,
        headers={'Content-Encoding': 'gzip', 'Content-Type': 'application/json'},
    )


@pytest_asyncio.fixture
async def upstream():
    app = web.Application()
    app.router.add_post('/echo', echo_handler)
    app.router.add_post('/headers', headers_handler)
    app.router.add_post('/digest', digest_handler)
    app.router.add_post('/redirect', redirect_handler)
    app.router.add_post('/gzip', gzip_handler)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def relay(test_config, web_root):
    client = TestClient(TestServer(create_app(test_config)), auto_decompress=False)
    await client.start_server()
    yield client
    await client.close()


@pytest.fixture
def self_signed_context():
    """Server-side TLS context with a certificate from a throwaway CA nobody trusts."""
    ca = trustme.CA()
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ca.issue_cert('127.0.0.1', 'localhost').configure_cert(context)
    return context


@pytest_asyncio.fixture
async def https_upstream(self_signed_context):
    app = web.Application()
    app.router.add_post('/echo', echo_handler)
    server = TestServer(app)
    await server.start_server(ssl=self_signed_context)
    yield server
    await server.close()


@pytest_asyncio.fixture
async def verifying_relay(test_config, web_root):
    test_config.set('relay.verify_upstream_tls', True)
    client = TestClient(TestServer(create_app(test_config)))
    await client.start_server()
    yield client
    await client.close()


def proxy_params(upstream, path):
    return {'url': str(upstream.make_url(path))}


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


@pytest.mark.integration
class TestForwarding:

    @pytest.mark.asyncio
    async def test_status_headers_and_body_mirrored(self, relay, upstream):
        payload = bytes(range(256)) * 4

        response = await relay.post('/proxy', params=proxy_params(upstream, '/echo'), data=payload)

        assert response.status == 201
        assert response.headers['X-Foo'] == 'bar'
        assert await response.read() == payload
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_connection_headers_are_not_forwarded(self, relay, upstream):
        response = await relay.post(
            '/proxy',
            params=proxy_params(upstream, '/headers'),
            data=b'x',
            headers={
                'Origin': 'http://localhost:3000',
                'Referer': 'http://localhost:3000/',
                'X-One': '1',
                'X-Two': '2',
            },
        )

        seen = json.loads(await response.read())
        assert 'Origin' not in seen
        assert 'Referer' not in seen
        assert seen['X-One'] == '1'
        assert seen['X-Two'] == '2'
        assert seen['Host'] == f'{upstream.host}:{upstream.port}'

    @pytest.mark.asyncio
    async def test_large_body_streams_through(self, relay, upstream):
        payload = b'\x5a\xa5' * (3 * 1024 * 1024)

        response = await relay.post('/proxy', params=proxy_params(upstream, '/digest'), data=payload)

        result = json.loads(await response.read())
        assert result['size'] == len(payload)
        assert result['sha256'] == hashlib.sha256(payload).hexdigest()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{}, {'url': ''}, {'url': '   '}])
    async def test_missing_target_is_bad_request(self, relay, params):
        response = await relay.post('/proxy', params=params, data=b'x')

        assert response.status == 400
        assert json.loads(await response.read()) == {'error': 'Target URL required'}
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_unreachable_target_is_bad_gateway(self, relay, upstream):
        dead = f'http://127.0.0.1:{unused_port()}/webhook'

        response = await relay.post('/proxy', params={'url': dead}, data=b'x')

        assert response.status == 502
        error = json.loads(await response.read())['error']
        assert error.startswith('Bad Gateway: ')
        assert_cors(response)

        # The relay keeps serving after a failed forward
        response = await relay.post('/proxy', params=proxy_params(upstream, '/echo'), data=b'ok')
        assert response.status == 201

    @pytest.mark.asyncio
    async def test_redirects_are_not_followed(self, relay, upstream):
        response = await relay.post(
            '/proxy', params=proxy_params(upstream, '/redirect'), data=b'x', allow_redirects=False,
        )

        assert response.status == 302
        assert response.headers['Location'] == 'http://127.0.0.1:1/elsewhere'

    @pytest.mark.asyncio
    async def test_compressed_body_passes_through(self, relay, upstream):
        response = await relay.post('/proxy', params=proxy_params(upstream, '/gzip'), data=b'x')

        assert response.headers['Content-Encoding'] == 'gzip'
        assert await response.read() == GZIPPED

    @pytest.mark.asyncio
    async def test_get_proxy_is_not_forwarded(self, relay, upstream):
        response = await relay.get('/proxy', params=proxy_params(upstream, '/echo'))

        assert response.status == 404


@pytest.mark.integration
class TestUpstreamTls:

    @pytest.mark.asyncio
    async def test_self_signed_upstream_reachable_by_default(self, relay, https_upstream):
        params = proxy_params(https_upstream, '/echo')
        assert params['url'].startswith('https://')

        response = await relay.post('/proxy', params=params, data=b'over tls')

        assert response.status == 201
        assert await response.read() == b'over tls'

    @pytest.mark.asyncio
    async def test_self_signed_upstream_rejected_when_verifying(self, verifying_relay, https_upstream):
        response = await verifying_relay.post('/proxy', params=proxy_params(https_upstream, '/echo'), data=b'x')

        assert response.status == 502
        error = json.loads(await response.read())['error']
        assert error.startswith('Bad Gateway: ')
        assert 'certificate' in error.lower()
        assert_cors(response)


@pytest.mark.integration
class TestCors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ['/proxy', '/', '/anything/at/all'])
    async def test_preflight(self, relay, path):
        response = await relay.options(path)

        assert response.status == 204
        assert await response.read() == b''
        assert_cors(response)


@pytest.mark.integration
class TestStaticAssets:

    @pytest.mark.asyncio
    async def test_root_serves_index(self, relay):
        response = await relay.get('/')

        assert response.status == 200
        assert response.headers['Content-Type'] == 'text/html'
        assert await response.text() == '<h1>Voice2Text</h1>'
        assert_cors(response)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path,content_type", [
        ('/app.js', 'text/javascript'),
        ('/style.css', 'text/css'),
        ('/assets/icon.svg', 'image/svg+xml'),
        ('/clip.webm', 'application/octet-stream'),
    ])
    async def test_content_types(self, relay, path, content_type):
        response = await relay.get(path)

        assert response.status == 200
        assert response.headers['Content-Type'] == content_type

    @pytest.mark.asyncio
    async def test_missing_file(self, relay):
        response = await relay.get('/missing.html')

        assert response.status == 404
        assert await response.text() == 'File not found'

    @pytest.mark.asyncio
    async def test_nul_byte_in_path(self, relay):
        response = await relay.get('/a%00b.html')

        assert response.status == 404
        assert await response.text() == 'File not found'

    @pytest.mark.asyncio
    async def test_directory_is_a_read_error(self, relay):
        response = await relay.get('/assets')

        assert response.status == 500
        assert await response.text() == 'Server Error: EISDIR'
