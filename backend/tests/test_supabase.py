"""Tests for the PostgREST gateway and GoTrue auth client, against httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from datetime import date, datetime, timezone

import httpx

from app.records.auth.supabase import SupabaseAuth
from app.records.gateway.supabase import SupabaseGateway, parse_content_range

URL = "https://project.supabase.co"
KEY = "anon-key"

ROW = {
    "incident_number": 25001,
    "unit_id": "MRS-1",
    "incident_date": "2025-11-06T18:32:08+00:00",
    "location": "12 Main St",
    "incident_type": "Fall",
    "content": {"incidentTimes": {"times": {}}},
}


class Recorder:
    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def _gateway(handler, token=None) -> tuple[SupabaseGateway, Recorder]:
    rec = Recorder(handler)
    gw = SupabaseGateway(url=URL, anon_key=KEY, transport=rec.transport).for_session(token)
    return gw, rec


def test_parse_content_range():
    assert parse_content_range("0-19/57") == 57
    assert parse_content_range("*/0") == 0
    assert parse_content_range("0-19/*") is None
    assert parse_content_range(None) is None


def test_recent_query_shape():
    gw, rec = _gateway(lambda r: httpx.Response(200, json=[ROW], headers={"Content-Range": "20-39/57"}), token="user-jwt")
    since = datetime(2025, 11, 3, 15, 0, tzinfo=timezone.utc)
    result = asyncio.run(gw.recent_incidents(page=2, limit=20, since=since))

    assert result.error is None
    assert result.count == 57
    assert result.rows[0].unit_id == "MRS-1"
    assert json.loads(result.rows[0].content) == ROW["content"]

    req = rec.requests[0]
    assert req.url.path == "/rest/v1/rip_and_runs"
    params = req.url.params
    assert params["incident_date"] == "gt.2025-11-03T15:00:00.000Z"
    assert params["order"] == "incident_date.desc"
    assert params["offset"] == "20"
    assert params["limit"] == "20"
    assert req.headers["Prefer"] == "count=exact"
    assert req.headers["apikey"] == KEY
    assert req.headers["Authorization"] == "Bearer user-jwt"


def test_by_date_query_is_half_open_day():
    gw, rec = _gateway(lambda r: httpx.Response(200, json=[], headers={"Content-Range": "*/0"}))
    result = asyncio.run(gw.incidents_by_date(day=date(2025, 11, 6), page=1, limit=20))

    assert result.count == 0
    bounds = rec.requests[0].url.params.get_list("incident_date")
    assert bounds == ["gte.2025-11-06T00:00:00.000Z", "lt.2025-11-07T00:00:00.000Z"]
    # no session token: the anon key doubles as bearer
    assert rec.requests[0].headers["Authorization"] == f"Bearer {KEY}"


def test_by_number_query_has_no_count():
    gw, rec = _gateway(lambda r: httpx.Response(200, json=[ROW]))
    result = asyncio.run(gw.incidents_by_number(25001))

    assert result.count is None
    req = rec.requests[0]
    assert req.url.params["incident_number"] == "eq.25001"
    assert req.url.params["order"] == "unit_id.asc"
    assert "Prefer" not in req.headers


def test_server_error_becomes_error_indicator():
    gw, _ = _gateway(lambda r: httpx.Response(500, json={"message": "boom"}))
    result = asyncio.run(gw.incidents_by_number(1))
    assert result.rows == []
    assert result.error


def test_network_error_becomes_error_indicator():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    gw, _ = _gateway(handler)
    result = asyncio.run(gw.recent_incidents(page=1, limit=20, since=datetime.now(timezone.utc)))
    assert result.error


def test_bad_row_becomes_error_indicator():
    gw, _ = _gateway(lambda r: httpx.Response(200, json=[{"unit_id": "no number"}]))
    result = asyncio.run(gw.incidents_by_number(1))
    assert result.error


def test_single_record():
    gw, rec = _gateway(lambda r: httpx.Response(200, json=ROW))
    result = asyncio.run(gw.get_incident(25001, "MRS-1"))

    assert result.record.incident_type == "Fall"
    req = rec.requests[0]
    assert req.headers["Accept"] == "application/vnd.pgrst.object+json"
    assert req.url.params["unit_id"] == "eq.MRS-1"


def test_single_record_missing():
    gw, _ = _gateway(lambda r: httpx.Response(406, json={"code": "PGRST116"}))
    result = asyncio.run(gw.get_incident(25001, "MRS-1"))
    assert result.record is None
    assert result.error is None


def _auth(handler) -> tuple[SupabaseAuth, Recorder]:
    rec = Recorder(handler)
    return SupabaseAuth(url=URL, anon_key=KEY, transport=rec.transport), rec


def test_sign_in_success():
    body = {
        "access_token": "jwt",
        "refresh_token": "refresh",
        "expires_in": 3600,
        "user": {"id": "u-1", "email": "medic@example.org"},
    }
    auth, rec = _auth(lambda r: httpx.Response(200, json=body))
    result = asyncio.run(auth.sign_in("medic@example.org", "pw"))

    assert result.error is None
    assert result.user.email == "medic@example.org"
    assert result.session.access_token == "jwt"
    req = rec.requests[0]
    assert req.url.path == "/auth/v1/token"
    assert req.url.params["grant_type"] == "password"
    assert json.loads(req.content) == {"email": "medic@example.org", "password": "pw"}


def test_sign_in_rejected():
    auth, _ = _auth(lambda r: httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}))
    result = asyncio.run(auth.sign_in("medic@example.org", "wrong"))
    assert result.error == "Invalid login credentials"
    assert result.session is None


def test_get_user():
    auth, rec = _auth(lambda r: httpx.Response(200, json={"id": "u-1", "email": "medic@example.org"}))
    user = asyncio.run(auth.get_user("jwt"))
    assert user.id == "u-1"
    assert rec.requests[0].headers["Authorization"] == "Bearer jwt"


def test_get_user_expired_token():
    auth, _ = _auth(lambda r: httpx.Response(401, json={"msg": "invalid JWT"}))
    assert asyncio.run(auth.get_user("stale")) is None
    assert asyncio.run(auth.get_user(None)) is None


def test_sign_out():
    auth, rec = _auth(lambda r: httpx.Response(204))
    assert asyncio.run(auth.sign_out("jwt")) is None
    assert rec.requests[0].url.path == "/auth/v1/logout"
