from membership_api.domain.entities import Role
from membership_api.infrastructure.models import MediaNews, News

from conftest import create_session, create_user

NEWS = {
    "title": "General assembly",
    "subtitle": "Annual meeting",
    "description": "All members are invited.",
    "programType": "OPERASIONAL",
}


def _create(client, **overrides):
    r = client.post("/admin/news", json={**NEWS, **overrides})
    assert r.status_code == 201
    return r.json()["data"]


def test_create_and_read(admin_client, admin):
    news = _create(admin_client)
    assert news["programType"] == "OPERASIONAL"

    r = admin_client.get(f"/admin/news/{news['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["user"]["id"] == admin.id


def test_create_with_unknown_program_type(admin_client):
    r = admin_client.post("/admin/news", json={**NEWS, "programType": "SPORTS"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid program type"


def test_missing_news(admin_client):
    r = admin_client.get("/admin/news/missing")
    assert r.status_code == 404
    assert r.json() == {"message": "News not found"}


def test_partial_upload_then_delete_all(admin_client, storage, db):
    news = _create(admin_client)
    storage.fail_names = {"broken.png"}

    r = admin_client.put(
        f"/admin/news-media/{news['id']}",
        files=[
            ("files", ("one.png", b"1", "image/png")),
            ("files", ("broken.png", b"2", "image/png")),
            ("files", ("three.png", b"3", "image/png")),
        ],
    )
    assert r.status_code == 200
    assert r.json()["addedMediaCount"] == 2
    assert r.json()["deletedMediaCount"] == 0

    media = admin_client.get(f"/admin/news/{news['id']}").json()["data"]["media"]
    assert sorted(r.json()["addedMediaIds"]) == sorted(m["id"] for m in media)
    assert [m["order"] for m in media] == [0, 2]
    assert len(storage.keys("news-media")) == 2

    ids = [m["id"] for m in media] + ["never-persisted"]
    r = admin_client.put(f"/admin/news-media/{news['id']}", data={"mediaIdsToDelete": ids})

    assert r.json()["deletedMediaCount"] == 2
    assert r.json()["addedMediaCount"] == 0
    assert r.json()["addedMediaIds"] == []
    assert storage.keys("news-media") == []
    assert db.query(MediaNews).count() == 0


def test_add_media_counts_successes(admin_client, storage):
    news = _create(admin_client)
    storage.fail_names = {"bad.png"}
    r = admin_client.post(
        f"/admin/news-media/{news['id']}",
        files=[("files", ("ok.png", b"1", "image/png")), ("files", ("bad.png", b"2", "image/png"))],
    )
    assert r.status_code == 201
    assert r.json()["count"] == 1


def test_other_admin_cannot_modify(admin_client, make_client, db):
    news = _create(admin_client)
    other = make_client(create_session(db, create_user(db, "admin2@x.com", Role.ADMIN)))

    assert other.put(f"/admin/news/{news['id']}", json={**NEWS, "title": "Changed"}).status_code == 403
    assert other.delete(f"/admin/news/{news['id']}").status_code == 403
    r = other.post(f"/admin/news-media/{news['id']}", files=[("files", ("a.png", b"a", "image/png"))])
    assert r.status_code == 403

    db.expire_all()
    assert db.get(News, news["id"]).title == "General assembly"


def test_update_text(admin_client):
    news = _create(admin_client)
    r = admin_client.put(f"/admin/news/{news['id']}", json={**NEWS, "title": "Rescheduled", "programType": "KEUANGAN"})
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Rescheduled"
    assert r.json()["data"]["programType"] == "KEUANGAN"


def test_delete_removes_blobs_from_news_bucket(admin_client, storage, db):
    news = _create(admin_client)
    admin_client.post(f"/admin/news-media/{news['id']}", files=[("files", ("a.png", b"a", "image/png"))])
    assert len(storage.keys("news-media")) == 1

    r = admin_client.delete(f"/admin/news/{news['id']}")

    assert r.status_code == 200
    assert [m["success"] for m in r.json()["mediaResults"]] == [True]
    assert storage.keys("news-media") == []
    db.expire_all()
    assert db.get(News, news["id"]) is None


def test_listing_is_paginated(admin_client):
    for i in range(3):
        _create(admin_client, title=f"Post {i}")
    r = admin_client.get("/admin/news", params={"page": 1, "limit": 2})
    body = r.json()
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
    assert len(body["data"]) == 2
