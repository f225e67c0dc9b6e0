import pytest

import routers.review_router as review_router

from core.errors import AppError, ErrorKind


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.INVALID_INPUT, 400),
        (ErrorKind.UNAUTHORIZED, 401),
        (ErrorKind.UNAUTHENTICATED, 401),
        (ErrorKind.FORBIDDEN, 403),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.CONFLICT, 409),
        (ErrorKind.PAYLOAD_TOO_LARGE, 400),
        (ErrorKind.INTERNAL, 500),
    ],
)
def test_error_kind_status(kind, status):
    assert kind.status_code == status
    assert AppError(kind, "x").status_code == status


def test_malformed_json_body_is_bad_request(client):
    res = client.post(
        "/signup", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "invalid request"}


def test_unknown_route_uses_error_shape(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}


def test_wrong_method_uses_error_shape(client):
    res = client.get("/reviews")
    assert res.status_code == 405
    assert "error" in res.json()


def test_root(client):
    assert client.get("/").status_code == 200


def test_unexpected_error_is_converted_once(client, monkeypatch, caplog):
    def broken(db, artist_id):
        raise RuntimeError("disk on fire at /var/secret")

    monkeypatch.setattr(review_router, "list_reviews", broken)
    # TestClient re-raises anything that escapes to the server error middleware
    with caplog.at_level("ERROR", logger="core.errors"):
        res = client.get("/artists/27/reviews")

    assert res.status_code == 500
    assert res.json() == {"error": "server error"}
    assert "secret" not in res.text
    assert len([r for r in caplog.records if r.name == "core.errors"]) == 1
