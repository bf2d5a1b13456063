import asyncio

import pytest
from aiohttp import web


@pytest.fixture
def request_log():
    """(method, path) of every request the target app receives, in order."""
    return []


@pytest.fixture
def target_app(request_log):
    """A small site with one route per status the scanner cares about."""

    @web.middleware
    async def record(request, handler):
        request_log.append((request.method, request.path))
        return await handler(request)

    async def admin(request):
        return web.Response(text="admin page")

    async def secret(request):
        raise web.HTTPForbidden()

    async def private(request):
        raise web.HTTPUnauthorized()

    async def old(request):
        raise web.HTTPMovedPermanently(location="/new/")

    async def notes(request):
        return web.Response(text="some notes")

    async def get_only(request):
        return web.Response(text="0123456789")

    async def post_only(request):
        return web.Response(text="posted")

    async def big_download(request):
        resp = web.StreamResponse()
        resp.content_length = 20 * 1024
        await resp.prepare(request)
        try:
            for _ in range(20):
                await resp.write(b"x" * 1024)
                await asyncio.sleep(0.1)
        except ConnectionResetError:
            pass
        return resp

    async def slow(request):
        await asyncio.sleep(1)
        return web.Response(text="late")

    app = web.Application(middlewares=[record])
    app.router.add_get("/admin", admin)
    app.router.add_get("/secret/", secret)
    app.router.add_get("/private", private)
    app.router.add_get("/old", old)
    app.router.add_get("/notes.txt", notes)
    # add_route("GET") registers no HEAD handler, so HEAD answers 405
    app.router.add_route("GET", "/getonly", get_only)
    app.router.add_route("POST", "/postonly", post_only)
    app.router.add_get("/slow", slow)
    app.router.add_get("/backup.zip", big_download)
    return app


@pytest.fixture
def wordlist_file(tmp_path):
    p = tmp_path / "words.txt"
    p.write_text("# common paths\nadmin\n\n  secret/  \nnotes.txt\n   # indented comment\n/private\n", encoding="utf-8")
    return p
