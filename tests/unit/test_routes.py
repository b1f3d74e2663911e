"""
HTTP tests through the FastAPI app with the database and usage cache overridden.
Run: pytest tests/unit/test_routes.py -v
"""
from linkfolio.core.security import ADMIN_SCOPE, create_access_token
from linkfolio.models.link import Link
from linkfolio.models.social import Social

API = "/api/v1"


def test_register_login_and_me(client):
    resp = client.post(
        f"{API}/auth/register",
        json={"username": "carol", "email": "Carol@Example.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    assert resp.json()["email"] == "carol@example.com"
    assert "hashed_password" not in resp.json()

    resp = client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": "wrong"})
    assert resp.status_code == 401

    resp = client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    resp = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "carol"


def test_register_rejects_bad_username_and_duplicates(client, make_user):
    make_user("taken")
    resp = client.post(f"{API}/auth/register", json={"username": "a b", "email": "x@example.com", "password": "secret123"})
    assert resp.status_code == 422
    resp = client.post(f"{API}/auth/register", json={"username": "taken", "email": "y@example.com", "password": "secret123"})
    assert resp.status_code == 400


def test_disabled_user_is_forbidden(client, make_user, auth_headers):
    user = make_user(is_disabled=True)
    resp = client.get(f"{API}/auth/me", headers=auth_headers(user))
    assert resp.status_code == 403


def test_missing_token_is_401(client):
    assert client.get(f"{API}/links").status_code == 401


def test_admin_token_is_not_a_user_token(client, make_user):
    user = make_user()
    token = create_access_token({"sub": user.id}, scope=ADMIN_SCOPE)
    resp = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_plan_limits_endpoint(client, make_user, auth_headers):
    user = make_user()
    resp = client.get(f"{API}/auth/plan-limits", headers=auth_headers(user))
    assert resp.status_code == 200
    body = resp.json()
    assert body["max_links"] == 5
    assert body["has_active_plan"] is False
    assert body["current_socials"] == 0


def test_link_limit_returns_403(client, make_user, auth_headers, db_session):
    user = make_user()
    db_session.add_all(
        [Link(user_id=user.id, title=f"l{i}", url="https://example.com", position=i) for i in range(5)]
    )
    db_session.commit()

    resp = client.post(
        f"{API}/links", json={"title": "one more", "url": "https://example.com/6"}, headers=auth_headers(user)
    )
    assert resp.status_code == 403
    assert resp.json()["limit_reached"] is True
    assert "5" in resp.json()["detail"]


def test_create_and_reorder_links(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)
    ids = []
    for i in range(3):
        resp = client.post(f"{API}/links", json={"title": f"l{i}", "url": f"https://example.com/{i}"}, headers=headers)
        assert resp.status_code == 201
        assert resp.json()["position"] == i
        ids.append(resp.json()["id"])

    resp = client.post(f"{API}/links/reorder", json={"ids": list(reversed(ids))}, headers=headers)
    assert resp.status_code == 200
    assert [link["id"] for link in resp.json()] == list(reversed(ids))
    assert [link["position"] for link in resp.json()] == [0, 1, 2]


def test_reorder_with_foreign_id_is_silent_noop(client, make_user, auth_headers, db_session):
    alice = make_user("alice")
    bob = make_user("bob")
    mine = Link(user_id=alice.id, title="mine", url="https://example.com", position=0)
    theirs = Link(user_id=bob.id, title="theirs", url="https://example.com", position=0)
    db_session.add_all([mine, theirs])
    db_session.commit()

    resp = client.post(f"{API}/links/reorder", json={"ids": [theirs.id, mine.id]}, headers=auth_headers(alice))
    assert resp.status_code == 200
    assert [link["id"] for link in resp.json()] == [mine.id]


def test_public_profile_hides_private_fields(client, make_user, db_session):
    user = make_user("shop")
    db_session.add_all(
        [
            Link(user_id=user.id, title="visible", url="https://example.com/a", position=1, active=True),
            Link(user_id=user.id, title="hidden", url="https://example.com/b", position=0, active=False),
            Social(user_id=user.id, platform="instagram", url="https://instagram.com/shop", position=0),
        ]
    )
    db_session.commit()

    resp = client.get(f"{API}/public/profile/shop")
    assert resp.status_code == 200
    body = resp.json()
    assert "email" not in body["user"]
    assert [link["title"] for link in body["links"]] == ["visible"]
    assert body["socials"][0]["platform"] == "instagram"

    assert client.get(f"{API}/public/profile/nobody").status_code == 404


def test_admin_seed_login_and_stats(client):
    assert client.get(f"{API}/admin/exists").json() == {"exists": False}

    payload = {"email": "root@example.com", "password": "supersecret", "name": "Root"}
    assert client.post(f"{API}/admin/seed", json=payload).status_code == 201
    assert client.post(f"{API}/admin/seed", json=payload).status_code == 403

    resp = client.post(f"{API}/admin/login", json={"email": "root@example.com", "password": "supersecret"})
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    stats = client.get(f"{API}/admin/stats", headers=headers)
    assert stats.status_code == 200
    assert stats.json()["total_users"] == 0


def test_admin_routes_reject_user_tokens(client, make_user, auth_headers):
    user = make_user()
    assert client.get(f"{API}/admin/stats", headers=auth_headers(user)).status_code == 401
    assert client.get(f"{API}/admin/affiliates", headers=auth_headers(user)).status_code == 401


def test_public_plans_only_active(client, make_plan):
    make_plan("Visible", sort_order=2)
    make_plan("Hidden", is_active=False)
    make_plan("First", sort_order=1)
    resp = client.get(f"{API}/payments/plans")
    assert [plan["name"] for plan in resp.json()] == ["First", "Visible"]


def test_register_with_referral_code(client, make_user, db_session):
    from linkfolio.models.affiliate import Affiliate, AffiliateReferral

    referrer = make_user("referrer")
    db_session.add(Affiliate(user_id=referrer.id, referral_code="REF-REFERRER-0A0B0C"))
    db_session.commit()

    resp = client.post(
        f"{API}/auth/register",
        json={
            "username": "invitee",
            "email": "invitee@example.com",
            "password": "secret123",
            "referral_code": "REF-REFERRER-0A0B0C",
        },
    )
    assert resp.status_code == 201
    assert db_session.query(AffiliateReferral).count() == 1


def test_health_reports_database_and_integrations(client, monkeypatch):
    monkeypatch.setattr("linkfolio.main.get_client", lambda: None)
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["database"] == "connected"
    assert body["redis"] == "not_configured"
    assert body["usage_cache"] == "memory"
