"""
Тест клиента базы вопросов и хостинга на GitHub Releases.
"""

import asyncio

import aiohttp
import pytest
from aiohttp import web

from clients.content import ContentClient
from clients.context import ClientContext
from clients.github import GitHubReleaseHost
from config import Category
from core.errors import HostingError, NotFoundError, TransportError

REPO = "owner/repo"


# ==================== КОНТЕНТ ====================

def content_app(index, questions, fail_status=None):
    async def index_handler(request):
        return web.json_response(index)

    async def question_handler(request):
        qid = request.match_info["qid"]
        if fail_status:
            return web.Response(status=fail_status, text="boom")
        if qid not in questions:
            return web.Response(status=404, text="Not Found")
        return web.json_response(questions[qid])

    app = web.Application()
    app.router.add_get("/index.json", index_handler)
    app.router.add_get("/{qid}.json", question_handler)
    return app


def with_content(serve, app, fn):
    async def run(session, base_url):
        return await fn(ContentClient(ClientContext(session=session), base_url=base_url))
    return asyncio.run(serve(app, run))


QUESTION = {
    "id": "42",
    "src": "https://gmatclub.com/forum/42.html",
    "type": "PS",
    "question": "<p>If x + 1 = 3, x = ?</p>",
    "answers": ["1", "2", "3", "4", "5"],
    "explanations": ["<p>x = 2</p>"],
}


def test_fetch_catalog(serve, index_data):
    catalog = with_content(serve, content_app(index_data, {}), lambda c: c.fetch_catalog())
    assert catalog.count(Category.PS) == 5
    assert catalog.category_of("300") == Category.DS


def test_fetch_question(serve, index_data):
    content = with_content(serve, content_app(index_data, {"42": QUESTION}), lambda c: c.fetch_question("42"))
    assert content.id == "42"
    assert content.answers == ["1", "2", "3", "4", "5"]
    assert content.type_tag == "PS"


def test_missing_question_is_not_found(serve, index_data):
    with pytest.raises(NotFoundError):
        with_content(serve, content_app(index_data, {}), lambda c: c.fetch_question("7"))


def test_server_error_is_transport_error(serve, index_data):
    with pytest.raises(TransportError) as exc_info:
        with_content(serve, content_app(index_data, {}, fail_status=503), lambda c: c.fetch_question("42"))
    assert exc_info.value.status == 503


def test_incompatible_record_is_not_found(serve, index_data):
    rc_record = {"id": "900", "passage": "...", "questions": [{"question": "q"}]}
    with pytest.raises(NotFoundError):
        with_content(serve, content_app(index_data, {"900": rc_record}), lambda c: c.fetch_question("900"))


# ==================== ХОСТИНГ ====================

def github_app(calls, fail_upload=False):
    async def create_release(request):
        body = await request.json()
        calls.append(("create", body["tag_name"], request.headers.get("Authorization")))
        origin = str(request.url.origin())
        return web.json_response(
            {"id": 1, "upload_url": f"{origin}/uploads/1/assets{{?name,label}}"}, status=201
        )

    async def latest_release(request):
        calls.append(("latest",))
        origin = str(request.url.origin())
        return web.json_response({"id": 5, "upload_url": f"{origin}/uploads/5/assets{{?name,label}}"})

    async def release_by_id(request):
        calls.append(("get", request.match_info["rid"]))
        origin = str(request.url.origin())
        return web.json_response({"id": 7, "upload_url": f"{origin}/uploads/7/assets{{?name,label}}"})

    async def upload(request):
        name = request.query["name"]
        data = await request.read()
        calls.append(("upload", request.match_info["rid"], name, data, request.headers["Content-Type"]))
        if fail_upload:
            return web.Response(status=422, text='{"message": "Validation Failed"}')
        return web.json_response(
            {"browser_download_url": f"https://github.com/{REPO}/releases/download/t/{name}"}, status=201
        )

    app = web.Application()
    app.router.add_post(f"/repos/{REPO}/releases", create_release)
    app.router.add_get(f"/repos/{REPO}/releases/latest", latest_release)
    app.router.add_get(f"/repos/{REPO}/releases/{{rid}}", release_by_id)
    app.router.add_post("/uploads/{rid}/assets", upload)
    return app


def with_host(serve, app, fn, **kwargs):
    async def run(session, base_url):
        ctx = ClientContext(session=session, github_token="gh-token", github_repository=REPO)
        return await fn(GitHubReleaseHost(ctx, api_base=base_url, **kwargs))
    return asyncio.run(serve(app, run))


def test_upload_creates_release_once(serve, tmp_path):
    image = tmp_path / "question_42.png"
    image.write_bytes(b"\x89PNG")
    calls = []

    async def upload_twice(host):
        return [await host.upload(image), await host.upload(image)]

    urls = with_host(serve, github_app(calls), upload_twice, tag_prefix="gmat")

    creates = [c for c in calls if c[0] == "create"]
    uploads = [c for c in calls if c[0] == "upload"]
    assert len(creates) == 1
    assert creates[0][1].startswith("gmat-")
    assert creates[0][2] == "Bearer gh-token"
    assert len(uploads) == 2
    assert uploads[0][1] == "1"
    assert uploads[0][3] == b"\x89PNG"
    assert uploads[0][4] == "image/png"
    # Имена ассетов уникальны
    assert uploads[0][2] != uploads[1][2]
    assert all(url.startswith(f"https://github.com/{REPO}/releases/download/") for url in urls)


def test_upload_to_latest_release(serve, tmp_path):
    image = tmp_path / "q.png"
    image.write_bytes(b"x")
    calls = []
    with_host(serve, github_app(calls), lambda h: h.upload(image), use_latest_release=True)
    assert calls[0] == ("latest",)
    assert calls[1][1] == "5"


def test_upload_to_release_by_id(serve, tmp_path):
    image = tmp_path / "q.png"
    image.write_bytes(b"x")
    calls = []
    with_host(serve, github_app(calls), lambda h: h.upload(image), release_id=7, use_latest_release=True)
    assert calls[0] == ("get", "7")
    assert calls[1][1] == "7"


def test_upload_failure_is_hosting_error(serve, tmp_path):
    image = tmp_path / "q.png"
    image.write_bytes(b"x")
    with pytest.raises(HostingError):
        with_host(serve, github_app([], fail_upload=True), lambda h: h.upload(image))


def test_missing_repository_is_hosting_error():
    async def build():
        async with aiohttp.ClientSession() as session:
            GitHubReleaseHost(ClientContext(session=session))

    with pytest.raises(HostingError):
        asyncio.run(build())
