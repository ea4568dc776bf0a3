import httpx
import pytest

from knowtrack.db.store import StoreClient
from knowtrack.errors import StoreError


def test_list_requests_everything_newest_first(store, fake_store):
    fake_store.seed("papers", title="old", status="unread", tags=[])
    fake_store.seed("papers", title="new", status="unread", tags=[])

    rows = store.list("papers")

    assert [r["title"] for r in rows] == ["new", "old"]
    method, path, params = fake_store.calls[-1]
    assert (method, path) == ("GET", "/rest/v1/papers")
    assert params == {"select": "*", "order": "created_at.desc"}


def test_writes_carry_access_token_and_reads_use_anon_key(settings):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.headers["apikey"], request.headers["authorization"]))
        if request.method == "GET":
            return httpx.Response(200, json=[])
        return httpx.Response(201, json=[{"id": 1}])

    client = StoreClient(settings, transport=httpx.MockTransport(handler))
    client.list("words")
    client.insert("words", {"word": "ephemeral"}, access_token="user-token")

    assert seen == [
        ("GET", "anon-key", "Bearer anon-key"),
        ("POST", "anon-key", "Bearer user-token"),
    ]


def test_insert_returns_created_row(store):
    created = store.insert("words", {"word": "laconic", "status": "unmastered"})

    assert created["word"] == "laconic"
    assert created["id"] == 1


def test_failure_surfaces_remote_message_verbatim(store, fake_store):
    fake_store.fail("PATCH", status=403, message="permission denied for table papers")

    with pytest.raises(StoreError) as exc:
        store.update("papers", 1, {"status": "read"})

    assert str(exc.value) == "permission denied for table papers"
    assert exc.value.status == 403


def test_failed_request_is_not_retried(store, fake_store):
    fake_store.fail("DELETE", status=503, message="unavailable")

    with pytest.raises(StoreError):
        store.delete("papers", 7)

    assert len(fake_store.writes("DELETE")) == 1


def test_transport_error_becomes_store_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = StoreClient(settings, transport=httpx.MockTransport(handler))
    with pytest.raises(StoreError, match="connection refused"):
        client.list("papers")


def test_non_json_error_body_falls_back_to_text(settings):
    client = StoreClient(settings, transport=httpx.MockTransport(lambda r: httpx.Response(502, text="Bad gateway")))

    with pytest.raises(StoreError, match="Bad gateway"):
        client.list("papers")


def test_sign_in_returns_session(store):
    session = store.sign_in("reader@example.com", "s3cret")

    assert session["access_token"] == "token-abc"


def test_sign_in_rejects_bad_password(store):
    with pytest.raises(StoreError, match="Invalid login credentials"):
        store.sign_in("reader@example.com", "nope")


def test_unreadable_success_body_is_store_error(store, fake_store):
    fake_store.garble("GET")

    with pytest.raises(StoreError, match="unreadable response"):
        store.list("papers")


def test_list_rejects_a_body_that_is_not_rows(settings):
    client = StoreClient(settings, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"rows": []})))

    with pytest.raises(StoreError, match="no row list"):
        client.list("words")
