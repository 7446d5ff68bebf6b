import pytest
import requests

from psr_console.security.session import EXPIRED_KEY, TOKEN_KEY, MappingSessionProvider
from psr_console.services.api_client import (
    NETWORK_ERROR_MESSAGE,
    APIError,
    ApiClient,
    ErrorCategory,
    categorize_status,
)

BASE_URL = "http://testserver/api/v1"


def test_get_sends_bearer_token_and_decodes_json(client, adapter):
    adapter.add("GET", "/ai/health", {"overall_status": "healthy"})

    assert client.get("/ai/health") == {"overall_status": "healthy"}
    assert adapter.last.headers["Authorization"] == "Bearer test-token"
    assert adapter.last.url == f"{BASE_URL}/ai/health"


def test_no_authorization_header_without_token(adapter):
    http = requests.Session()
    http.mount("http://", adapter)
    anonymous = ApiClient(MappingSessionProvider({}), base_url=BASE_URL, http=http)
    adapter.add("GET", "/ai/health", {})

    anonymous.get("ai/health")

    assert "Authorization" not in adapter.last.headers


def test_empty_body_returns_none(client, adapter):
    adapter.add("DELETE", "/ai/training-files/1", status=204)

    assert client.delete("/ai/training-files/1") is None


def test_401_is_authentication_and_notifies_session(client, adapter, session_provider):
    adapter.add("GET", "/admin/stats", {"detail": "Token expired"}, status=401)

    with pytest.raises(APIError) as exc_info:
        client.get("/admin/stats")

    assert exc_info.value.status == 401
    assert exc_info.value.category == ErrorCategory.AUTHENTICATION
    assert exc_info.value.message == "Token expired"
    assert session_provider.unauthorized_count == 1


def test_401_clears_token_held_in_session_state(adapter):
    state = {TOKEN_KEY: "abc"}
    http = requests.Session()
    http.mount("http://", adapter)
    api = ApiClient(MappingSessionProvider(state), base_url=BASE_URL, http=http)
    adapter.add("GET", "/users/me", {"detail": "Not authenticated"}, status=401)

    with pytest.raises(APIError):
        api.get("/users/me")

    assert TOKEN_KEY not in state
    assert state[EXPIRED_KEY] is True


@pytest.mark.parametrize("status,category", [
    (400, ErrorCategory.VALIDATION),
    (403, ErrorCategory.PERMISSION),
    (404, ErrorCategory.NOT_FOUND),
    (409, ErrorCategory.HTTP),
    (422, ErrorCategory.VALIDATION),
    (503, ErrorCategory.SERVER),
])
def test_categorize_status(status, category):
    assert categorize_status(status) == category


def test_validation_detail_list_is_joined(client, adapter):
    adapter.add("POST", "/admin/create-admin", {
        "detail": [
            {"loc": ["body", "email"], "msg": "invalid email"},
            {"loc": ["body", "password"], "msg": "too short"},
        ]
    }, status=422)

    with pytest.raises(APIError) as exc_info:
        client.post("/admin/create-admin", json={})

    assert exc_info.value.message == "invalid email; too short"
    assert exc_info.value.errors == ["invalid email", "too short"]


def test_message_field_used_when_no_detail(client, adapter):
    adapter.add("GET", "/ai/training-jobs", {"message": "Database unavailable"}, status=500)

    with pytest.raises(APIError) as exc_info:
        client.get("/ai/training-jobs")

    assert exc_info.value.category == ErrorCategory.SERVER
    assert exc_info.value.message == "Database unavailable"


def test_non_json_error_falls_back_to_status_line(client, adapter):
    adapter.add("GET", "/ai/health", raw=b"<html>Bad Gateway</html>", status=502)

    with pytest.raises(APIError) as exc_info:
        client.get("/ai/health")

    assert exc_info.value.message == "HTTP 502: Error"


def test_connection_error_is_network_category(client, adapter):
    adapter.fail("GET", "/ai/health", requests.ConnectionError("refused"))

    with pytest.raises(APIError) as exc_info:
        client.get("/ai/health")

    assert exc_info.value.status == 0
    assert exc_info.value.category == ErrorCategory.NETWORK
    assert exc_info.value.message == NETWORK_ERROR_MESSAGE


def test_non_json_success_is_response_error(client, adapter):
    adapter.add("GET", "/ai/health", raw=b"ok")

    with pytest.raises(APIError) as exc_info:
        client.get("/ai/health")

    assert exc_info.value.category == ErrorCategory.RESPONSE


def test_multipart_upload_does_not_force_json_content_type(client, adapter):
    adapter.add("POST", "/ai/upload-training-data", {"success": True})

    client.post("/ai/upload-training-data", files=[("files", ("a.txt", b"hi", "text/plain"))])

    assert adapter.last.headers["Content-Type"].startswith("multipart/form-data")
