from datetime import datetime, timedelta, timezone

from membership_api.domain.entities import MemberStatus
from membership_api.infrastructure.models import (
    ActivityProgram,
    MediaActivity,
    OrganizationStructure,
    SessionORM,
    UserORM,
)

from conftest import create_session, create_user


def test_members_second_page(admin_client, db):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i in range(1, 13):
        create_user(db, f"m{i:02d}@x.com", name=f"Member {i:02d}", created_at=base + timedelta(minutes=i))

    r = admin_client.get("/admin/members", params={"page": 2, "limit": 5})

    assert r.status_code == 200
    body = r.json()
    # newest first: m12..m08 on page 1, m07..m03 on page 2
    assert [m["email"] for m in body["data"]] == [f"m{i:02d}@x.com" for i in range(7, 2, -1)]
    assert body["pagination"] == {"total": 12, "page": 2, "limit": 5, "totalPages": 3}


def test_members_listing_excludes_admins(admin_client, member):
    body = admin_client.get("/admin/members").json()
    assert [m["email"] for m in body["data"]] == [member.email]
    assert body["pagination"]["totalPages"] == 1


def test_members_listing_rejects_bad_page(admin_client):
    r = admin_client.get("/admin/members", params={"page": 0})
    assert r.status_code == 400


def test_create_member(admin_client, db):
    r = admin_client.post(
        "/admin/members",
        json={"name": "New Member", "email": "new@x.com", "password": "secret1", "programType": "MARKETING"},
    )
    assert r.status_code == 201
    assert r.json()["data"]["role"] == "MEMBER"

    dup = admin_client.post(
        "/admin/members",
        json={"name": "New Member", "email": "new@x.com", "password": "secret1"},
    )
    assert dup.status_code == 409


def test_update_member_status(admin_client, member):
    r = admin_client.patch(f"/admin/members/{member.id}", json={"status": "SUSPENDED"})
    assert r.status_code == 200
    assert r.json()["data"]["status"] == MemberStatus.SUSPENDED.value

    r = admin_client.patch(f"/admin/members/{member.id}", json={"status": "BANNED"})
    assert r.status_code == 400
    assert r.json()["message"] == "Status is not Match"

    r = admin_client.patch("/admin/members/missing", json={"status": "ACTIVE"})
    assert r.status_code == 404


def test_delete_member_cascades(admin_client, make_client, member, storage, db):
    member_client = make_client(create_session(db, member))
    member_client.put(f"/auth/edit-avatar/{member.id}", files={"avatar": ("me.png", b"me", "image/png")})
    member_client.put(
        f"/auth/edit-id-card-photo/{member.id}",
        files={"idCardPhoto": ("card.png", b"card", "image/png")},
    )
    activity = member_client.post(
        "/member/activity-program", json={"title": "Cleanup", "description": "Beach"}
    ).json()["data"]
    member_client.post(
        f"/member/activity-media/{activity['id']}",
        files=[("files", ("a.png", b"a", "image/png"))],
    )

    r = admin_client.delete(f"/admin/members/{member.id}")

    assert r.status_code == 200
    assert storage.objects == {}
    db.expire_all()
    assert db.get(UserORM, member.id) is None
    assert db.query(ActivityProgram).count() == 0
    assert db.query(MediaActivity).count() == 0
    assert db.query(SessionORM).filter(SessionORM.user_id == member.id).count() == 0
    assert member_client.get("/auth/me").status_code == 401


def test_delete_missing_member(admin_client):
    r = admin_client.delete("/admin/members/missing")
    assert r.status_code == 404
    assert r.json() == {"message": "User not found"}


# --- organization structure

def _structure(admin_client, name, order, position, image=("p.png", b"img", "image/png")):
    files = {"image": image} if image else None
    return admin_client.post(
        "/admin/organization-structure",
        data={"name": name, "order": str(order), "position": position},
        files=files,
    )


def test_structure_requires_all_fields(admin_client):
    r = admin_client.post("/admin/organization-structure", data={"name": "Budi"})
    assert r.status_code == 400
    assert r.json()["message"] == "Name, Order, and Position are all required."

    r = _structure(admin_client, "Budi", 1, "CHAIRMAN", image=None)
    assert r.status_code == 400
    assert r.json()["message"] == "Image is required"

    r = _structure(admin_client, "Budi", 1, "JANITOR")
    assert r.status_code == 400
    assert r.json()["message"] == "Position is not Match"


def test_structure_listing_is_ordered(admin_client, client):
    _structure(admin_client, "Sari", 2, "SECRETARY")
    _structure(admin_client, "Budi", 1, "CHAIRMAN")
    _structure(admin_client, "Eko", 3, "TREASURER")

    r = client.get("/free/organization-structures")

    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert [s["name"] for s in body["data"]] == ["Budi", "Sari", "Eko"]
    assert body["data"][0]["mediaUrl"].startswith("https://blobs.test/organization-images/")


def test_structure_update_keeps_or_replaces_image(admin_client, storage):
    created = _structure(admin_client, "Budi", 1, "CHAIRMAN").json()["data"]

    r = admin_client.put(
        f"/admin/organization-structure/{created['id']}",
        data={"name": "Budi S", "position": "VICE_CHAIRMAN"},
    )
    assert r.status_code == 200
    assert r.json()["data"]["mediaUrl"] == created["mediaUrl"]
    assert r.json()["data"]["position"] == "VICE_CHAIRMAN"
    assert r.json()["data"]["order"] == 1

    r = admin_client.put(
        f"/admin/organization-structure/{created['id']}",
        data={"position": "VICE_CHAIRMAN"},
        files={"image": ("new.png", b"new", "image/png")},
    )
    assert r.json()["data"]["mediaUrl"] != created["mediaUrl"]
    assert len(storage.keys("organization-images")) == 1


def test_structure_update_rejects_bad_position(admin_client):
    created = _structure(admin_client, "Budi", 1, "CHAIRMAN").json()["data"]
    r = admin_client.put(f"/admin/organization-structure/{created['id']}", data={"position": "KING"})
    assert r.status_code == 400


def test_structure_delete(admin_client, storage, db):
    created = _structure(admin_client, "Budi", 1, "CHAIRMAN").json()["data"]

    r = admin_client.delete(f"/admin/organization-structure/{created['id']}")

    assert r.status_code == 200
    assert storage.keys("organization-images") == []
    assert db.query(OrganizationStructure).count() == 0
    assert admin_client.delete(f"/admin/organization-structure/{created['id']}").status_code == 404


def test_structure_create_storage_failure(admin_client, storage, db):
    storage.fail_names = {"p.png"}
    r = _structure(admin_client, "Budi", 1, "CHAIRMAN")
    assert r.status_code == 500
    assert r.json()["message"] == "Storage Error"
    assert db.query(OrganizationStructure).count() == 0


def test_free_listing_empty(client):
    assert client.get("/free/organization-structures").json() == {
        "message": "Organization structures retrieved successfully",
        "data": [],
        "count": 0,
    }
