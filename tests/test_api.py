"""HTTP-level tests for the /api/v1 blueprint."""

import io

from tests.factories import PodcastFactory, UserFactory

CSV_BODY = (
    "Podcast Title,Podcast Host(s),Country of Production,Categories\n"
    'The Wine Hour,Jane Doe,Italy,"Wine, Culture"\n'
    "Cellar Notes,,France,Wine\n"
).encode()


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.get_json() == {"ok": True}


def test_unknown_route_is_json_404(client):
    response = client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.get_json() == {"error": "not found"}


# ---------------------------------------------------------------------------
# Podcasts CRUD + search
# ---------------------------------------------------------------------------

def test_create_get_update_delete(client):
    response = client.post("/api/v1/podcasts", json={
        "title": " Wine Talk ", "host": "Jane Doe", "categories": "Wine, Food",
    })
    assert response.status_code == 201
    created = response.get_json()
    assert created["title"] == "Wine Talk"
    assert created["country"] == "Unknown"
    assert created["categories"] == ["Wine", "Food"]
    pid = created["id"]

    assert client.get(f"/api/v1/podcasts/{pid}").get_json()["host"] == "Jane Doe"

    response = client.patch(f"/api/v1/podcasts/{pid}", json={"country": "Italy"})
    assert response.status_code == 200
    assert response.get_json()["country"] == "Italy"
    assert response.get_json()["title"] == "Wine Talk"

    response = client.put(f"/api/v1/podcasts/{pid}", json={"title": "Wine Talk"})
    assert response.status_code == 400
    assert "Missing host" in response.get_json()["error"]

    assert client.delete(f"/api/v1/podcasts/{pid}").get_json() == {"deleted": pid}
    assert client.get(f"/api/v1/podcasts/{pid}").status_code == 404


def test_create_requires_title(client):
    response = client.post("/api/v1/podcasts", json={"host": "Jane"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Missing title"}


def test_search_endpoint(client):
    PodcastFactory(title="Vino Veritas", country="Italy", categories=["Wine"])
    PodcastFactory(title="Food Stories", country="Spain", categories=["Food"])

    body = client.get("/api/v1/podcasts?categories=Food,Travel").get_json()
    assert body["total"] == 1
    assert body["podcasts"][0]["title"] == "Food Stories"

    body = client.get("/api/v1/podcasts?sort=title-desc&limit=1").get_json()
    assert body["total"] == 2
    assert [p["title"] for p in body["podcasts"]] == ["Vino Veritas"]

    assert client.get("/api/v1/podcasts?sort=random").status_code == 400


def test_facets_endpoint(client):
    PodcastFactory(country="Italy", categories=["Wine", "Travel"])
    facets = client.get("/api/v1/podcasts/facets").get_json()
    assert facets["countries"] == ["Italy"]
    assert facets["categories"] == ["Travel", "Wine"]


# ---------------------------------------------------------------------------
# CSV import
# ---------------------------------------------------------------------------

def test_import_multipart(client):
    response = client.post(
        "/api/v1/podcasts/import",
        data={"csv_file": (io.BytesIO(CSV_BODY), "podcasts.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    report = response.get_json()
    assert report["success"] is True
    assert report["imported"] == 1
    assert report["errors"] == 1
    assert report["error_messages"][0].startswith("Row 2: Missing host")
    assert report["total_rows"] == 2
    assert report["headers"][0] == "Podcast Title"
    assert report["podcasts"][0]["categories"] == ["Wine", "Culture"]


def test_import_raw_body_and_overwrite(client):
    client.post("/api/v1/podcasts/import", data=CSV_BODY, content_type="text/csv")

    again = client.post("/api/v1/podcasts/import", data=CSV_BODY,
                        content_type="text/csv").get_json()
    assert again["imported"] == 0
    assert again["duplicates_skipped"] == 1
    assert again["overwrite_mode"] is False

    changed = CSV_BODY.replace(b"Italy", b"France")
    replaced = client.post("/api/v1/podcasts/import?overwrite=true", data=changed,
                           content_type="text/csv").get_json()
    assert replaced["updated"] == 1
    assert replaced["updated_podcasts"][0]["country"] == "France"

    body = client.get("/api/v1/podcasts").get_json()
    assert body["total"] == 1


def test_import_missing_file(client):
    response = client.post("/api/v1/podcasts/import", data={"title": "x"},
                           content_type="multipart/form-data")
    assert response.status_code == 400


def test_import_empty_body(client):
    response = client.post("/api/v1/podcasts/import", data=b"", content_type="text/csv")
    assert response.status_code == 400


def test_import_malformed_csv_is_single_failure(client):
    response = client.post("/api/v1/podcasts/import",
                           data=b'title,host\nA,"B"x\n', content_type="text/csv")
    assert response.status_code == 500
    body = response.get_json()
    assert body["message"] == "CSV import failed"
    assert "Unreadable CSV" in body["error"]


# ---------------------------------------------------------------------------
# Users, favorites, notes
# ---------------------------------------------------------------------------

def test_user_registration_rules(client):
    response = client.post("/api/v1/users", json={"username": "ada", "email": "ada@example.com"})
    assert response.status_code == 201
    uid = response.get_json()["id"]
    assert client.get(f"/api/v1/users/{uid}").get_json()["username"] == "ada"

    dup = client.post("/api/v1/users", json={"username": "ada"})
    assert dup.status_code == 400
    assert dup.get_json()["error"] == "Username already exists"

    short = client.post("/api/v1/users", json={"username": "x"})
    assert short.status_code == 400


def test_favorites_flow(client):
    user = UserFactory()
    podcast = PodcastFactory()
    url = f"/api/v1/users/{user.id}/favorites"

    first = client.post(url, json={"podcast_id": podcast.id})
    second = client.post(url, json={"podcast_id": podcast.id})
    assert first.status_code == 201
    assert second.get_json()["id"] == first.get_json()["id"]
    assert [f["podcast_id"] for f in client.get(url).get_json()] == [podcast.id]

    assert client.post(url, json={"podcast_id": "missing"}).status_code == 404

    assert client.delete(f"{url}/{podcast.id}").status_code == 204
    assert client.get(url).get_json() == []


def test_notes_flow(client):
    user = UserFactory()
    podcast = PodcastFactory()
    base = f"/api/v1/users/{user.id}/notes"

    assert client.post(base, json={"podcast_id": podcast.id, "note": "  "}).status_code == 400

    created = client.post(base, json={"podcast_id": podcast.id, "note": "Try the 2016"})
    assert created.status_code == 201
    note_id = created.get_json()["id"]

    assert client.get(f"{base}/{podcast.id}").get_json()["note"] == "Try the 2016"

    updated = client.put(f"{base}/by-id/{note_id}", json={"note": "Try the 2017"})
    assert updated.get_json()["note"] == "Try the 2017"

    other = UserFactory()
    assert client.delete(f"/api/v1/users/{other.id}/notes/by-id/{note_id}").status_code == 404

    assert client.delete(f"{base}/by-id/{note_id}").status_code == 204
    assert client.get(base).get_json() == []


def test_deleting_podcast_removes_favorites(client):
    user = UserFactory()
    podcast = PodcastFactory()
    client.post(f"/api/v1/users/{user.id}/favorites", json={"podcast_id": podcast.id})

    client.delete(f"/api/v1/podcasts/{podcast.id}")

    assert client.get(f"/api/v1/users/{user.id}/favorites").get_json() == []
