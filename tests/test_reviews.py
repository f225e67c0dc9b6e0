"""Review listing, creation and owner-only deletion."""

import pytest
from sqlalchemy.exc import OperationalError

import crud.review_crud as review_crud
import routers.review_router as review_router
from conftest import REVIEW_FIELDS, signup
from crud.review_crud import parse_star_rating
from models.review import Review


def _create(client, **overrides):
    return client.post("/reviews", json={**REVIEW_FIELDS, **overrides})


def test_end_to_end_create_and_delete(client):
    alice = signup(client, "alice", "pw123")
    assert alice.status_code == 200
    alice_id = alice.json()["id"]

    created = _create(client)
    assert created.status_code == 201
    review = created.json()
    assert review["user_id"] == alice_id
    assert review["username"] == "alice"
    assert review["artist_id"] == "27"
    assert review["star_rating"] == 5

    listed = client.get("/artists/27/reviews").json()
    assert [r["id"] for r in listed] == [review["id"]]

    res = client.delete(f"/reviews/{review['id']}")
    assert res.status_code == 200
    assert res.json() == {"ok": True}

    assert client.get("/artists/27/reviews").json() == []


def test_list_reviews_is_public_and_newest_first(client, other_client):
    signup(client)
    first = _create(client, reviewTitle="first").json()
    second = _create(client, reviewTitle="second").json()
    _create(client, artistId="99")

    res = other_client.get("/artists/27/reviews")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()] == [second["id"], first["id"]]
    assert all(r["username"] == "alice" for r in res.json())


def test_list_reviews_for_unknown_artist_is_empty(client):
    res = client.get("/artists/nobody/reviews")
    assert res.status_code == 200
    assert res.json() == []


def test_create_requires_session(client):
    res = _create(client)
    assert res.status_code == 401
    assert res.json() == {"error": "Not authenticated"}


@pytest.mark.parametrize(
    "missing", ["artistId", "artistName", "trackTitle", "reviewTitle", "reviewDescription"]
)
def test_create_requires_fields(client, missing):
    signup(client)
    payload = {k: v for k, v in REVIEW_FIELDS.items() if k != missing}
    res = client.post("/reviews", json=payload)
    assert res.status_code == 400
    assert res.json() == {"error": "missing required fields"}

    res = _create(client, **{missing: "   "})
    assert res.status_code == 400


def test_optional_fields_default_to_empty(client):
    signup(client)
    payload = {
        "artistId": 27,
        "artistName": "Daft Punk",
        "trackTitle": "Aerodynamic",
        "reviewTitle": "Solo",
        "reviewDescription": "That guitar.",
    }
    review = client.post("/reviews", json=payload).json()
    assert review["artist_id"] == "27"
    for field in ("artist_description", "artist_picture", "album_title", "track_length", "track_artwork"):
        assert review[field] == ""
    assert review["star_rating"] == 1


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 1),
        ("", 1),
        ("abc", 1),
        (True, 1),
        (-3, 1),
        (0, 1),
        (1, 1),
        (3, 3),
        (5, 5),
        (6, 5),
        (1000, 5),
        ("4", 4),
        (" 2 stars", 2),
        ("4.8", 4),
        (3.9, 3),
        ("-7", 1),
        ("+9", 5),
        (float("nan"), 1),
        ([4], 1),
    ],
)
def test_parse_star_rating(raw, expected):
    assert parse_star_rating(raw) == expected


@pytest.mark.parametrize("raw", [-10, 0, 42, "xyz", "3", None, 2.5])
def test_persisted_star_rating_is_clamped(client, db, raw):
    signup(client)
    review = _create(client, starRating=raw).json()
    stored = db.query(Review).filter(Review.id == review["id"]).one()
    assert 1 <= stored.star_rating <= 5
    assert stored.star_rating == review["star_rating"]


def test_other_user_cannot_delete(client, other_client):
    signup(client, "alice")
    review = _create(client).json()

    signup(other_client, "bob")
    res = other_client.delete(f"/reviews/{review['id']}")
    assert res.status_code == 403
    assert res.json() == {"error": "forbidden"}

    assert client.delete(f"/reviews/{review['id']}").status_code == 200


@pytest.mark.parametrize("review_id", ["12345", "not-a-number"])
def test_delete_unknown_review_is_not_found(client, review_id):
    signup(client)
    res = client.delete(f"/reviews/{review_id}")
    assert res.status_code == 404
    assert res.json() == {"error": "not found"}


def test_delete_requires_session(client, other_client):
    signup(client)
    review = _create(client).json()
    res = other_client.delete(f"/reviews/{review['id']}")
    assert res.status_code == 401


def test_missing_refetch_is_server_error(client, monkeypatch):
    signup(client)
    monkeypatch.setattr(review_crud, "get_review", lambda db, review_id: None)
    res = _create(client)
    assert res.status_code == 500
    assert res.json() == {"error": "server error"}


def test_store_failure_does_not_leak_detail(client, monkeypatch):
    def broken(db, artist_id):
        raise OperationalError("SELECT ...", {}, Exception("connection refused to db-host:3306"))

    monkeypatch.setattr(review_router, "list_reviews", broken)
    res = client.get("/artists/27/reviews")
    assert res.status_code == 500
    assert res.json() == {"error": "server error"}


@pytest.mark.parametrize("value", [0, False, True, ["Daft Punk"], {"name": "x"}])
def test_required_field_rejects_falsy_and_non_text(client, value):
    signup(client)
    res = _create(client, artistName=value)
    assert res.status_code == 400
    assert res.json() == {"error": "missing required fields"}


@pytest.mark.parametrize("value", [True, False, ["x"], {"k": "v"}])
def test_optional_field_rejects_non_text(client, db, value):
    signup(client)
    res = _create(client, albumTitle=value)
    assert res.status_code == 400
    assert res.json() == {"error": "invalid review fields"}
    assert db.query(Review).count() == 0


def test_numeric_fields_are_stored_as_text(client):
    signup(client)
    review = _create(client, artistId=4050205, trackLength=320).json()
    assert review["artist_id"] == "4050205"
    assert review["track_length"] == "320"
