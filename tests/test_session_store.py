import requests

from conftest import PRIMARY, SECONDARY
from schedconsole.api.routes import LOGIN_PATH, TOKEN_PATH
from schedconsole.auth.session import PasswordCredentials, PublicKeyCredentials, Session, SessionStore
from schedconsole.runtime.storage import KeyValueStore


def test_initialize_restores_persisted_token(tmp_path):
    storage = KeyValueStore(tmp_path / "storage.json")
    storage.set("jwtToken", "persisted")

    store = SessionStore(storage)
    assert store.authenticated is False

    session = store.initialize()
    assert session == Session(token="persisted")
    assert store.authenticated is True

    # idempotent
    assert store.initialize() == session


def test_initialize_without_token_is_unauthenticated(tmp_path):
    store = SessionStore(KeyValueStore(tmp_path / "storage.json"))
    store.initialize()
    assert store.token is None
    assert store.authenticated is False


def test_password_login_with_nested_envelope(ctx, http):
    http.route("POST", PRIMARY + LOGIN_PATH, body={"success": True, "data": {"token": "abc"}})

    result = ctx.session.login(ctx.api, PasswordCredentials("admin", "secret"))

    assert result.status == "success"
    assert result.message == "Login successful!"
    assert ctx.session.token == "abc"
    assert ctx.session.authenticated is True
    assert ctx.storage.get("jwtToken") == "abc"
    call = http.calls[-1]
    assert call["json"] == {"username": "admin", "password": "secret"}
    assert "Authorization" not in call["headers"]


def test_public_key_login_with_flat_envelope_goes_to_decision_service(ctx, http):
    http.route("POST", SECONDARY + TOKEN_PATH, body={"success": True, "token": "xyz"})

    result = ctx.session.login(ctx.api, PublicKeyCredentials("-----BEGIN PUBLIC KEY-----"))

    assert result.message == "Authentication successful!"
    assert ctx.session.token == "xyz"
    assert http.calls[-1]["json"] == {"public_key": "-----BEGIN PUBLIC KEY-----"}


def test_rejected_login_reports_server_reason(ctx, http):
    http.route("POST", PRIMARY + LOGIN_PATH, status=401, body={"success": False, "error": "bad creds"})

    result = ctx.session.login(ctx.api, PasswordCredentials("admin", "wrong"))

    assert result.status == "error"
    assert result.message == "Login failed: bad creds"
    assert ctx.session.authenticated is False
    assert ctx.storage.get("jwtToken") is None


def test_success_without_token_is_a_failure(ctx, http):
    http.route("POST", PRIMARY + LOGIN_PATH, body={"success": True})
    http.route("POST", SECONDARY + TOKEN_PATH, body={"success": True, "data": {}})

    pw = ctx.session.login(ctx.api, PasswordCredentials("a", "b"))
    pk = ctx.session.login(ctx.api, PublicKeyCredentials("k"))

    assert pw.message == "Login failed: Invalid credentials"
    assert pk.message == "Authentication failed: Unknown error"
    assert ctx.session.authenticated is False


def test_http_error_with_success_body_is_rejected(ctx, http):
    http.route("POST", PRIMARY + LOGIN_PATH, status=500, body={"success": True, "token": "abc", "message": "oops"})

    result = ctx.session.login(ctx.api, PasswordCredentials("a", "b"))

    assert result.message == "Login failed: oops"
    assert ctx.session.token is None


def test_transport_failure_leaves_session_unchanged(ctx, http):
    ctx.storage.set("jwtToken", "old")
    ctx.session.initialize()
    http.fail("POST", PRIMARY + LOGIN_PATH, requests.Timeout("read timed out"))

    result = ctx.session.login(ctx.api, PasswordCredentials("a", "b"))

    assert result.status == "error"
    assert result.message.startswith("Request failed: ")
    assert "read timed out" in result.message
    assert ctx.session.token == "old"


def test_logout_clears_storage_and_notifies(ctx):
    seen = []
    ctx.session.subscribe(seen.append)
    ctx.storage.set("jwtToken", "abc")
    ctx.session.initialize()

    ctx.session.logout()

    assert ctx.session.authenticated is False
    assert ctx.storage.get("jwtToken") is None
    assert seen == [Session(token="abc"), Session(token=None)]


def test_listeners_fire_only_on_change_and_survive_failures(ctx):
    calls = []

    def broken(_session):
        raise RuntimeError("listener bug")

    ctx.session.subscribe(broken)
    ctx.session.subscribe(calls.append)

    ctx.session.logout()
    assert calls == []

    ctx.storage.set("jwtToken", "abc")
    ctx.session.initialize()
    ctx.session.initialize()
    assert calls == [Session(token="abc")]
