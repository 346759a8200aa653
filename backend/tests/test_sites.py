"""
Tests for the user-facing site endpoints: quotas, uniqueness and access rules.
"""
from mycerti.constants import PageStatus, SiteRole
from mycerti.models import Asset, Page, Site, SiteUser, User


def _user_id(db, email):
    return db.query(User.id).filter(User.email == email).scalar()


class TestCreateSite:

    def test_first_free_site_gets_free_quotas(self, client, user_token, headers):
        response = client.post(
            "/sites",
            json={"name": "Test", "subdomain": "test1", "plan": "free"},
            headers=headers(user_token),
        )
        assert response.status_code == 201
        site = response.json()["site"]
        assert site["plan"] == "free"
        assert site["quota_pages"] == 10
        assert site["quota_assets_mb"] == 100
        assert site["status"] == "active"

    def test_plan_defaults_to_free(self, client, user_token, headers):
        response = client.post("/sites", json={"name": "Test", "subdomain": "test1"}, headers=headers(user_token))
        assert response.status_code == 201
        assert response.json()["site"]["plan"] == "free"

    def test_second_free_site_exceeds_quota(self, client, user_token, headers, create_site):
        create_site(user_token)
        response = client.post(
            "/sites",
            json={"name": "Again", "subdomain": "test2", "plan": "free"},
            headers=headers(user_token),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Site limit reached for free plan"}

    def test_pro_plan_allows_five_sites(self, client, user_token, headers, create_site):
        for index in range(5):
            site = create_site(user_token, name=f"Pro {index}", subdomain=f"pro-{index}", plan="pro")
            assert site["quota_pages"] == 100
            assert site["quota_assets_mb"] == 1000

        response = client.post(
            "/sites",
            json={"name": "Sixth", "subdomain": "pro-5", "plan": "pro"},
            headers=headers(user_token),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Site limit reached for pro plan"}

    def test_limit_counts_all_owned_sites(self, client, user_token, headers, create_site):
        create_site(user_token, subdomain="free-one", plan="free")
        site = create_site(user_token, subdomain="pro-one", plan="pro")
        assert site["plan"] == "pro"

    def test_enterprise_quotas(self, user_token, create_site):
        site = create_site(user_token, subdomain="big", plan="enterprise")
        assert site["quota_pages"] == 1000
        assert site["quota_assets_mb"] == 10000

    def test_subdomain_is_globally_unique(self, client, signup, headers, create_site):
        _, first = signup(email="first@b.com")
        _, second = signup(email="second@b.com")
        create_site(first, subdomain="shared")

        response = client.post(
            "/sites",
            json={"name": "Mine", "subdomain": "shared", "plan": "free"},
            headers=headers(second),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Subdomain already taken"}

    def test_subdomain_pattern(self, client, user_token, headers):
        for subdomain in ("Upper", "has space", "under_score", ""):
            response = client.post(
                "/sites",
                json={"name": "Bad", "subdomain": subdomain},
                headers=headers(user_token),
            )
            assert response.status_code == 400, subdomain

    def test_unknown_plan_rejected(self, client, user_token, headers):
        response = client.post(
            "/sites",
            json={"name": "Bad", "subdomain": "bad", "plan": "platinum"},
            headers=headers(user_token),
        )
        assert response.status_code == 400

    def test_creation_adds_owner_membership_and_home_page(self, user_token, create_site, db):
        site = create_site(user_token)

        members = db.query(SiteUser).filter(SiteUser.site_id == site["id"]).all()
        assert [(m.user_id, m.role) for m in members] == [(_user_id(db, "a@b.com"), SiteRole.OWNER)]

        pages = db.query(Page).filter(Page.site_id == site["id"]).all()
        assert len(pages) == 1
        assert pages[0].path == "/"
        assert pages[0].title == "Welcome"
        assert pages[0].status == PageStatus.DRAFT

    def test_requires_user_token(self, client):
        response = client.post("/sites", json={"name": "Test", "subdomain": "test1"})
        assert response.status_code == 401


class TestListSites:

    def test_lists_owned_and_member_sites(self, client, signup, headers, create_site, db):
        _, owner_token = signup(email="owner@b.com")
        member, member_token = signup(email="member@b.com")
        shared = create_site(owner_token, subdomain="shared")
        own = create_site(member_token, subdomain="own")

        db.add(SiteUser(site_id=shared["id"], user_id=member["id"], role=SiteRole.MEMBER))
        db.commit()

        response = client.get("/sites", headers=headers(member_token))
        assert response.status_code == 200
        sites = {site["subdomain"]: site for site in response.json()["sites"]}
        assert set(sites) == {"shared", "own"}
        assert sites["shared"]["role"] == "member"
        assert sites["own"]["role"] == "owner"
        assert sites["own"]["id"] == own["id"]
        assert sites["own"]["total_pages"] == 1
        assert sites["own"]["published_pages"] == 0

    def test_other_users_sites_hidden(self, client, signup, headers, create_site):
        _, owner_token = signup(email="owner@b.com")
        _, other_token = signup(email="other@b.com")
        create_site(owner_token)

        response = client.get("/sites", headers=headers(other_token))
        assert response.json() == {"sites": []}

    def test_listing_is_idempotent(self, client, user_token, headers, create_site):
        create_site(user_token)
        first = client.get("/sites", headers=headers(user_token))
        second = client.get("/sites", headers=headers(user_token))
        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()


class TestGetSite:

    def test_detail_includes_stats(self, client, user_token, headers, create_site, db):
        site = create_site(user_token)
        db.add(Page(site_id=site["id"], path="/about", title="About", status=PageStatus.PUBLISHED))
        db.add(Asset(site_id=site["id"], filename="logo.png", size_bytes=2 * 1024 * 1024))
        db.add(Asset(site_id=site["id"], filename="hero.jpg", size_bytes=1024 * 1024))
        db.commit()

        response = client.get(f"/sites/{site['id']}", headers=headers(user_token))
        assert response.status_code == 200
        detail = response.json()["site"]
        assert detail["role"] == "owner"
        assert detail["stats"] == {
            "published_pages": 1,
            "total_pages": 2,
            "total_assets": 2,
            "total_size_bytes": 3 * 1024 * 1024,
            "storage_used_mb": 3.0,
        }

    def test_no_access_is_404(self, client, signup, headers, create_site):
        _, owner_token = signup(email="owner@b.com")
        _, other_token = signup(email="other@b.com")
        site = create_site(owner_token)

        response = client.get(f"/sites/{site['id']}", headers=headers(other_token))
        assert response.status_code == 404
        assert response.json() == {"error": "Site not found or access denied"}

    def test_missing_site_looks_the_same(self, client, user_token, headers):
        response = client.get("/sites/999", headers=headers(user_token))
        assert response.status_code == 404
        assert response.json() == {"error": "Site not found or access denied"}


class TestUpdateSite:

    def test_rename(self, client, user_token, headers, create_site):
        site = create_site(user_token)
        response = client.put(f"/sites/{site['id']}", json={"name": "Renamed"}, headers=headers(user_token))
        assert response.status_code == 200
        assert response.json()["site"]["name"] == "Renamed"

    def test_plan_change_resets_quotas(self, client, user_token, headers, create_site):
        site = create_site(user_token)
        response = client.put(f"/sites/{site['id']}", json={"plan": "pro"}, headers=headers(user_token))
        assert response.status_code == 200
        updated = response.json()["site"]
        assert updated["plan"] == "pro"
        assert updated["quota_pages"] == 100
        assert updated["quota_assets_mb"] == 1000

    def test_no_fields(self, client, user_token, headers, create_site):
        site = create_site(user_token)
        response = client.put(f"/sites/{site['id']}", json={}, headers=headers(user_token))
        assert response.status_code == 400
        assert response.json() == {"error": "No fields to update"}

    def test_member_cannot_update(self, client, signup, headers, create_site, db):
        _, owner_token = signup(email="owner@b.com")
        member, member_token = signup(email="member@b.com")
        site = create_site(owner_token)
        db.add(SiteUser(site_id=site["id"], user_id=member["id"], role=SiteRole.ADMIN))
        db.commit()

        assert client.get(f"/sites/{site['id']}", headers=headers(member_token)).status_code == 200
        response = client.put(f"/sites/{site['id']}", json={"name": "Mine"}, headers=headers(member_token))
        assert response.status_code == 404


class TestDeleteSite:

    def test_delete_cascades(self, client, user_token, headers, create_site, db):
        site = create_site(user_token)
        db.add(Asset(site_id=site["id"], filename="logo.png", size_bytes=10))
        db.commit()

        response = client.delete(f"/sites/{site['id']}", headers=headers(user_token))
        assert response.status_code == 200

        db.expire_all()
        assert db.get(Site, site["id"]) is None
        assert db.query(SiteUser).filter(SiteUser.site_id == site["id"]).count() == 0
        assert db.query(Page).filter(Page.site_id == site["id"]).count() == 0
        assert db.query(Asset).filter(Asset.site_id == site["id"]).count() == 0

    def test_delete_frees_quota(self, client, user_token, headers, create_site):
        site = create_site(user_token)
        client.delete(f"/sites/{site['id']}", headers=headers(user_token))
        create_site(user_token, subdomain="test2")

    def test_non_owner_cannot_delete(self, client, signup, headers, create_site):
        _, owner_token = signup(email="owner@b.com")
        _, other_token = signup(email="other@b.com")
        site = create_site(owner_token)

        response = client.delete(f"/sites/{site['id']}", headers=headers(other_token))
        assert response.status_code == 404
        assert client.get(f"/sites/{site['id']}", headers=headers(owner_token)).status_code == 200
