"""StorageAPI and object path layout."""

import pytest
import pytest_asyncio

from task_tracker.errors import UploadError
from task_tracker.storage import StorageAPI, build_object_path
from task_tracker.transport.http import HttpClient

from fakes import ANON_KEY, BASE_URL, EMAIL


def test_object_path_is_namespaced_by_user_and_time():
    assert build_object_path("user-1", "cat.png", now_ms=1700000000123) == "user-1/1700000000123-cat.png"


def test_object_path_uses_file_name_only():
    assert build_object_path("user-1", "/home/ada/Pictures/cat.png", now_ms=5) == "user-1/5-cat.png"


def test_object_path_defaults_to_current_millis():
    path = build_object_path("user-1", "cat.png")
    stamp = path.split("/")[1].split("-")[0]
    assert len(stamp) >= 13
    assert stamp.isdigit()


@pytest_asyncio.fixture
async def storage(backend):
    session = backend.issue_session(EMAIL)
    http = HttpClient(BASE_URL, ANON_KEY, token=session["access_token"], transport=backend.transport())
    yield StorageAPI(http)
    await http.close()


class TestStorage:
    @pytest.mark.asyncio
    async def test_upload(self, storage, backend):
        key = await storage.upload("user-1/5-cat.png", b"meow", "image/png")
        assert key == "uploads/user-1/5-cat.png"
        assert backend.objects["uploads/user-1/5-cat.png"] == b"meow"
        request = backend.requests_to("POST", "/storage/v1/object/uploads/")[-1]
        assert request.headers["Content-Type"] == "image/png"

    @pytest.mark.asyncio
    async def test_duplicate_upload_fails(self, storage):
        await storage.upload("user-1/5-cat.png", b"meow")
        with pytest.raises(UploadError, match="already exists"):
            await storage.upload("user-1/5-cat.png", b"meow")

    @pytest.mark.asyncio
    async def test_unauthenticated_upload_fails(self, backend):
        http = HttpClient(BASE_URL, ANON_KEY, transport=backend.transport())
        with pytest.raises(UploadError, match="row-level security"):
            await StorageAPI(http).upload("user-1/5-cat.png", b"meow")
        await http.close()

    @pytest.mark.asyncio
    async def test_public_url(self, storage):
        assert storage.get_public_url("user-1/5-cat.png") == (
            f"{BASE_URL}/storage/v1/object/public/uploads/user-1/5-cat.png"
        )

    @pytest.mark.asyncio
    async def test_public_url_quotes_path(self, storage):
        assert storage.get_public_url("user-1/5-my cat.png").endswith("/uploads/user-1/5-my%20cat.png")
