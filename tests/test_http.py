"""HttpClient: headers, body decoding and error mapping."""

import httpx
import pytest

from task_tracker.errors import BackendError
from task_tracker.transport.http import HttpClient

from fakes import ANON_KEY, BASE_URL


def make_http(handler, token=None) -> HttpClient:
    return HttpClient(BASE_URL, ANON_KEY, token=token, transport=httpx.MockTransport(handler))


class TestHeaders:
    @pytest.mark.asyncio
    async def test_anonymous_request_uses_anon_key_as_bearer(self):
        seen = []
        http = make_http(lambda r: seen.append(r) or httpx.Response(200, json={}), token="user-token")
        await http.post("/auth/v1/token", {"a": 1}, authenticated=False)
        assert seen[0].headers["apikey"] == ANON_KEY
        assert seen[0].headers["Authorization"] == f"Bearer {ANON_KEY}"
        await http.close()

    @pytest.mark.asyncio
    async def test_authenticated_request_uses_access_token(self):
        seen = []
        http = make_http(lambda r: seen.append(r) or httpx.Response(200, json=[]))
        http.set_token("user-token")
        await http.get("/rest/v1/tasks", params={"select": "*"})
        assert seen[0].headers["Authorization"] == "Bearer user-token"
        assert seen[0].headers["apikey"] == ANON_KEY
        assert seen[0].url.params["select"] == "*"
        await http.close()

    @pytest.mark.asyncio
    async def test_cleared_token_falls_back_to_anon_key(self):
        seen = []
        http = make_http(lambda r: seen.append(r) or httpx.Response(200, json=[]), token="user-token")
        http.set_token(None)
        await http.get("/rest/v1/tasks")
        assert seen[0].headers["Authorization"] == f"Bearer {ANON_KEY}"
        await http.close()

    @pytest.mark.asyncio
    async def test_upload_sends_raw_body_and_content_type(self):
        seen = []
        http = make_http(lambda r: seen.append(r) or httpx.Response(200, json={"Key": "k"}))
        await http.upload("/storage/v1/object/uploads/a.png", b"\x89PNG", "image/png")
        assert seen[0].content == b"\x89PNG"
        assert seen[0].headers["Content-Type"] == "image/png"
        await http.close()


class TestResponses:
    @pytest.mark.asyncio
    async def test_no_content_decodes_to_none(self):
        http = make_http(lambda r: httpx.Response(204))
        assert await http.delete("/rest/v1/tasks", params={"id": "eq.1"}) is None
        await http.close()

    @pytest.mark.asyncio
    async def test_json_body_is_returned(self):
        http = make_http(lambda r: httpx.Response(200, json=[{"id": 1}]))
        assert await http.get("/rest/v1/tasks") == [{"id": 1}]
        await http.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body,expected", [
        ({"code": 400, "msg": "Invalid login credentials"}, "Invalid login credentials"),
        ({"code": "42501", "message": "permission denied for table tasks"}, "permission denied for table tasks"),
        ({"error": "invalid_grant", "error_description": "Refresh token revoked"}, "Refresh token revoked"),
        ({"error": "Duplicate"}, "Duplicate"),
    ])
    async def test_error_message_taken_from_body(self, body, expected):
        http = make_http(lambda r: httpx.Response(400, json=body))
        with pytest.raises(BackendError) as exc:
            await http.get("/anything")
        assert exc.value.message == expected
        assert exc.value.status == 400
        await http.close()

    @pytest.mark.asyncio
    async def test_non_json_error_falls_back_to_status_and_text(self):
        http = make_http(lambda r: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(BackendError) as exc:
            await http.get("/anything")
        assert exc.value.message == "HTTP 502: Bad Gateway"
        await http.close()

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_backend_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = make_http(handler)
        with pytest.raises(BackendError) as exc:
            await http.get("/anything")
        assert exc.value.status == 0
        assert "connection refused" in exc.value.message
        await http.close()

    @pytest.mark.asyncio
    async def test_non_json_success_body_becomes_backend_error(self):
        http = make_http(lambda r: httpx.Response(200, text="<html>proxy</html>", headers={"Content-Type": "text/html"}))
        with pytest.raises(BackendError) as exc:
            await http.post("/rest/v1/tasks", [{"title": "t"}])
        assert exc.value.status == 200
        assert "<html>proxy</html>" in exc.value.message
        await http.close()
