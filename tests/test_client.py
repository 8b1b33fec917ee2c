import json
from unittest.mock import MagicMock

import requests

from nudge_api_client import NudgeAPI


def _response(status_code=200, payload=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if payload is None else json.dumps(payload).encode()
    response.headers["Content-Type"] = "application/json"
    return response


def _api(*responses):
    session = MagicMock()
    session.request.side_effect = list(responses)
    return NudgeAPI(base_url="http://api.test/", session=session), session


def test_create_event_encodes_form():
    api, session = _api(_response(201, {"message": "Event created successfully", "event_id": "abc"}))

    event_id, error = api.create_event({"name": "Launch", "attendees": ["u1"], "tagline": None, "rigor_rank": 2})

    assert (event_id, error) == ("abc", None)
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "http://api.test/api/v3/app/events"
    assert kwargs["data"] == {"name": "Launch", "attendees": '["u1"]', "tagline": "", "rigor_rank": "2"}


def test_error_message_comes_from_body():
    api, _ = _api(_response(404, {"error": "Event not found"}))

    event, error = api.get_event("f" * 24)

    assert event is None
    assert error == {"status_code": 404, "message": "Event not found"}


def test_connection_failure():
    api, session = _api(requests.ConnectionError("refused"))

    nudges, error = api.list_nudges()

    assert nudges == []
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_list_helpers_unwrap_envelopes():
    api, session = _api(
        _response(200, {"events": [{"name": "A"}], "total": 1}),
        _response(200, {"nudges": [{"title": "N"}], "total": 1}),
    )

    assert api.list_events() == ([{"name": "A"}], None)
    assert api.nudges_for_event("e" * 24) == ([{"title": "N"}], None)
    assert session.request.call_args.kwargs["params"] == {"event_id": "e" * 24}


def test_health_uses_server_root():
    api, session = _api(_response(200, {"status": "OK", "message": "Event API is running"}))

    data, error = api.health()

    assert error is None and data["status"] == "OK"
    assert session.request.call_args.kwargs["url"] == "http://api.test/health"


def test_delete_nudge():
    api, _ = _api(_response(200, {"message": "Nudge deleted successfully", "nudge_id": "n1"}))
    assert api.delete_nudge("n1") == (True, None)
