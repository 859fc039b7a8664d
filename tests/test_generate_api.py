import pytest

from app import create_app
from domain.errors import UpstreamError, UpstreamTimeout
from domain.models import DailyUsage, db
from domain.policies import FALLBACK_DRAFT
from services.ai.router import get_completion_client
from utils.time_utils import utc_today
from tests.conftest import TEST_CONFIG, generate, login


def _usage(client):
    return client.get("/api/usage").get_json()


def test_first_anonymous_call_returns_three_drafts(client, completion):
    resp = generate(client)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["drafts"] == ["Draft one.", "Draft two.", "Draft three."]
    assert body["quota"] == {"limit": 5, "used": 1, "remaining": 4, "pro": False}
    assert "sr_anon=" in resp.headers.get("Set-Cookie", "")
    assert resp.headers["Cache-Control"].startswith("no-store")

    system_prompt, user_prompt = completion.calls[0]
    assert "Use a friendly tone" in system_prompt
    assert user_prompt == "My order #1234 arrived damaged, what can I do?"


def test_sixth_anonymous_call_is_rejected_and_not_counted(client, completion):
    for _ in range(5):
        assert generate(client).status_code == 200

    resp = generate(client)

    assert resp.status_code == 429
    body = resp.get_json()
    assert body["error"] == "DAILY_LIMIT_REACHED"
    assert (body["limit"], body["remaining"], body["pro"]) == (5, 0, False)
    assert "Sign in" in body["message"]
    assert len(completion.calls) == 5
    assert _usage(client)["used"] == 5


def test_new_cookie_gets_fresh_anonymous_allowance(app, completion):
    first = app.test_client()
    for _ in range(5):
        generate(first)

    assert generate(app.test_client()).status_code == 200


def test_invalid_request_consumes_no_quota(client, completion):
    resp = generate(client, message="<p>123456789</p>")

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Message must be at least 10 characters long"}
    assert completion.calls == []
    assert _usage(client)["used"] == 0


def test_invalid_tone_is_rejected(client, completion):
    resp = generate(client, tone="Angry")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Tone must be one of: Friendly, Professional, Concise"


def test_non_json_body_is_rejected(client, completion):
    resp = client.post("/api/generate", data="hello", content_type="text/plain")

    assert resp.status_code == 400
    assert completion.calls == []


def test_rejected_call_still_sets_anonymous_cookie(client, completion):
    resp = generate(client, message="short")

    assert resp.status_code == 400
    assert "sr_anon=" in resp.headers.get("Set-Cookie", "")


def test_cookie_is_only_set_once(client, completion):
    generate(client)
    resp = generate(client)

    assert "sr_anon=" not in resp.headers.get("Set-Cookie", "")


def test_short_provider_reply_is_padded(client, completion):
    completion.reply = "First paragraph.\n\nSecond paragraph."

    body = generate(client).get_json()

    assert body["drafts"] == ["First paragraph.", "Second paragraph.", FALLBACK_DRAFT]


def test_empty_provider_reply_is_padded(client, completion):
    completion.reply = ""

    assert generate(client).get_json()["drafts"] == [FALLBACK_DRAFT] * 3


def test_language_directive_reaches_provider(client, completion):
    generate(client, tone="Concise", language="Spanish")

    system_prompt, _ = completion.calls[0]
    assert "Respond in Spanish." in system_prompt
    assert "Use a concise tone" in system_prompt


def test_timeout_returns_408_and_spends_the_unit(client, completion):
    completion.error = UpstreamTimeout(15)

    resp = generate(client)

    assert resp.status_code == 408
    assert resp.get_json() == {"error": "Request timeout - please try again", "code": "UPSTREAM_TIMEOUT"}
    assert _usage(client)["used"] == 1


def test_upstream_error_hides_provider_detail(client, completion):
    completion.error = UpstreamError(500, detail="secret internal trace")

    resp = generate(client)

    assert resp.status_code == 502
    assert resp.get_json() == {"error": "Failed to generate replies", "code": "UPSTREAM_ERROR"}
    assert "secret" not in resp.get_data(as_text=True)


def test_missing_api_key_fails_before_metering(app, client):
    app.completion_client_factory = get_completion_client
    app.config["OPENAI_API_KEY"] = None

    resp = generate(client)

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["code"] == "MISSING_API_KEY"
    assert "OPENAI_API_KEY" in body["message"]
    assert _usage(client)["used"] == 0


def test_unexpected_error_is_generic_500(client, completion):
    completion.error = RuntimeError("kaboom")

    resp = generate(client)

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_free_user_quota_and_last_unit(app, client, completion):
    login(client, "free-1")
    with app.app_context():
        db.session.add(DailyUsage(user_id="free-1", day=utc_today(), count=19))
        db.session.commit()

    ok = generate(client)
    blocked = generate(client)

    assert ok.status_code == 200
    assert ok.get_json()["quota"] == {"limit": 20, "used": 20, "remaining": 0, "pro": False}
    assert blocked.status_code == 429
    assert blocked.get_json()["limit"] == 20
    assert "sr_anon=" not in ok.headers.get("Set-Cookie", "")


def test_pro_user_sees_unlimited_quota(client, completion):
    login(client, "pro-1", "pro@example.com")
    assert client.post("/api/debug/set-pro").status_code == 200

    body = generate(client).get_json()

    assert body["quota"] == {"limit": None, "used": 1, "remaining": None, "pro": True}


def test_request_id_is_echoed_or_assigned(client, completion):
    echoed = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assigned = generate(client)

    assert echoed.headers["X-Request-ID"] == "abc-123"
    assert assigned.headers["X-Request-ID"]


@pytest.mark.parametrize("bad_id", ["has spaces", "x" * 65])
def test_malformed_request_id_is_replaced(client, bad_id):
    resp = client.get("/health", headers={"X-Request-ID": bad_id})
    assert resp.headers["X-Request-ID"] != bad_id


def test_oversized_payload_is_rejected(app, client, completion):
    app.config["MAX_PAYLOAD_BYTES"] = 100

    resp = generate(client, message="x" * 500)

    assert resp.status_code == 413
    assert completion.calls == []


def _anon_cookie_attrs(resp):
    header = next(h for h in resp.headers.getlist("Set-Cookie") if h.startswith("sr_anon="))
    return header.split("; ")[1:]


def test_anonymous_cookie_attributes(client, completion):
    attrs = _anon_cookie_attrs(generate(client))

    assert "HttpOnly" in attrs
    assert "SameSite=Lax" in attrs
    assert "Max-Age=2592000" in attrs
    assert "Secure" not in attrs


def test_anonymous_cookie_is_secure_in_production():
    app = create_app({**TEST_CONFIG, "ENV": "production"})

    attrs = _anon_cookie_attrs(app.test_client().get("/api/usage"))

    assert "Secure" in attrs
    assert "HttpOnly" in attrs
    assert "SameSite=Lax" in attrs
    assert "Max-Age=2592000" in attrs
