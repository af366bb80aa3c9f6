import io

from warehub.modules.listings.promotion import origin_marker
from warehub.shared.database.models import Warehouse, Booking, User, Listing


class TestAuth:
    def test_register_login_me(self, client):
        response = client.post("/api/v1/auth/register", json={
            "name": "Arjun Mehta",
            "email": "Arjun@Example.com",
            "password": "Demo@1234",
            "roles": ["warehouse_owner", "MERCHANT"],
            "contactNumber": "9812345678",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "arjun@example.com"
        assert body["user"]["roles"] == ["WAREHOUSE_OWNER", "MERCHANT"]
        assert body["user"]["role"] == "owner"
        assert "passwordHash" not in body["user"]

        login = client.post("/api/v1/auth/login", json={"email": "arjun@example.com", "password": "Demo@1234"})
        assert login.status_code == 200
        token = login.json()["token"]
        assert login.json()["accessToken"] == token

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["contactNumber"] == "9812345678"

    def test_duplicate_email_conflicts(self, client, merchant):
        response = client.post("/api/v1/auth/register", json={
            "name": "Priya", "email": merchant.email, "password": "secret1", "roles": ["MERCHANT"],
        })
        assert response.status_code == 409

    def test_unknown_role_rejected(self, client):
        response = client.post("/api/v1/auth/register", json={
            "name": "X", "email": "x@example.com", "password": "secret1", "roles": ["ROOT"],
        })
        assert response.status_code == 422

    def test_bad_password(self, client, merchant):
        response = client.post("/api/v1/auth/login", json={"email": merchant.email, "password": "nope"})
        assert response.status_code == 401

    def test_missing_and_garbage_tokens(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401
        assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    def test_roles_come_from_database(self, client, db, make_user, auth_headers):
        user = make_user(["MERCHANT"])
        headers = auth_headers(user)

        user.roles = ["MERCHANT", "WAREHOUSE_OWNER"]
        db.commit()

        assert client.get("/api/v1/listings", headers=headers).status_code == 200

    def test_inactive_user_rejected(self, client, make_user, auth_headers):
        user = make_user(["MERCHANT"], is_active=False)
        assert client.get("/api/v1/auth/me", headers=auth_headers(user)).status_code == 401


class TestListings:
    def test_merchant_cannot_use_wizard(self, client, merchant, auth_headers):
        assert client.get("/api/v1/listings", headers=auth_headers(merchant)).status_code == 403

    def test_owner_sees_only_own_listings(self, client, owner, make_user, make_listing, auth_headers):
        other = make_user(["WAREHOUSE_OWNER"])
        mine = make_listing(owner)
        theirs = make_listing(other)
        headers = auth_headers(owner)

        listed = client.get("/api/v1/listings", headers=headers).json()
        assert [item["id"] for item in listed] == [mine.id]
        assert client.get(f"/api/v1/listings/{theirs.id}", headers=headers).status_code == 404
        assert client.put(
            f"/api/v1/listings/{theirs.id}", json={"title": "hijack"}, headers=headers
        ).status_code == 404

    def test_unknown_status_rejected(self, client, owner, auth_headers):
        response = client.post("/api/v1/listings", json={"status": "LIVE"}, headers=auth_headers(owner))
        assert response.status_code == 422


class TestWarehouses:
    def test_catalogue_hides_unapproved_and_disabled(self, client, owner, make_warehouse):
        visible = make_warehouse(owner, name="Visible")
        make_warehouse(owner, name="Pending", is_approved=False)
        make_warehouse(owner, name="Disabled", is_disabled_by_admin=True)

        body = client.get("/api/v1/warehouses").json()

        assert [w["id"] for w in body["warehouses"]] == [visible.id]
        assert body["warehouses"][0]["pricePerSqft"] == 22.5

    def test_take_caps_results(self, client, owner, make_warehouse):
        for n in range(3):
            make_warehouse(owner, name=f"W{n}")
        assert len(client.get("/api/v1/warehouses", params={"take": 2}).json()["warehouses"]) == 2

    def test_search_filters(self, client, owner, make_warehouse):
        okhla = make_warehouse(owner, name="Okhla Logistics Hub", city="Delhi", available_space=14000)
        make_warehouse(owner, name="Navi Mumbai Cold Store", city="Mumbai", available_space=18000)

        by_text = client.get("/api/v1/warehouses/search", params={"q": "delhi"}).json()
        assert [w["id"] for w in by_text] == [okhla.id]

        by_size = client.get("/api/v1/warehouses/search", params={"minSqFt": "15000", "maxSqFt": ""}).json()
        assert [w["name"] for w in by_size] == ["Navi Mumbai Cold Store"]

        assert client.get("/api/v1/warehouses/search", params={"minSqFt": "lots"}).status_code == 400

    def test_owner_scope_includes_pending(self, client, owner, merchant, make_warehouse, auth_headers):
        pending = make_warehouse(owner, is_approved=False)

        mine = client.get(f"/api/v1/warehouses/owner/{owner.id}", headers=auth_headers(owner))
        assert [w["id"] for w in mine.json()] == [pending.id]

        other = client.get(f"/api/v1/warehouses/owner/{owner.id}", headers=auth_headers(merchant))
        assert other.status_code == 403

    def test_delete_blocked_by_bookings(self, client, db, owner, merchant, make_warehouse, auth_headers):
        warehouse = make_warehouse(owner)
        db.add(Booking(warehouse_id=warehouse.id, merchant_id=merchant.id, status="PENDING"))
        db.commit()

        response = client.delete(f"/api/v1/warehouses/{warehouse.id}", headers=auth_headers(owner))

        assert response.status_code == 409

    def test_owner_deletes_unbooked_warehouse(self, client, owner, make_warehouse, auth_headers):
        warehouse = make_warehouse(owner)
        response = client.delete(f"/api/v1/warehouses/{warehouse.id}", headers=auth_headers(owner))
        assert response.json() == {"ok": True}
        assert client.get(f"/api/v1/warehouses/{warehouse.id}").status_code == 404

    def test_image_upload_uses_storage(self, client, owner, make_warehouse, auth_headers):
        from warehub.main import app
        from warehub.shared.services.cloudinary_service import get_image_storage

        class FakeStorage:
            deleted = []

            async def upload_warehouse_image(self, image_file, warehouse_id, user_id):
                return f"https://images.example/{warehouse_id}/{image_file.filename}"

            async def delete_image(self, url):
                self.deleted.append(url)
                return True

        warehouse = make_warehouse(owner, image_url="https://images.example/old.jpg")
        app.dependency_overrides[get_image_storage] = lambda: FakeStorage()

        response = client.post(
            f"/api/v1/warehouses/{warehouse.id}/image",
            files={"image": ("cover.jpg", io.BytesIO(b"jpeg-bytes"), "image/jpeg")},
            headers=auth_headers(owner),
        )

        assert response.status_code == 201
        assert response.json()["imageUrl"] == f"https://images.example/{warehouse.id}/cover.jpg"
        assert FakeStorage.deleted == ["https://images.example/old.jpg"]


class TestMarketplaceFlow:
    def test_publish_approve_book_accept(self, client, db, owner, merchant, admin, notifier, auth_headers):
        owner_h, merchant_h, admin_h = auth_headers(owner), auth_headers(merchant), auth_headers(admin)

        # Owner drafts and publishes a listing
        created = client.post("/api/v1/listings", json={
            "title": "Okhla Ambient Storage",
            "description": "Dock access",
            "address": {"addressLine1": "A-12, Okhla Phase II", "city": "Delhi", "state": "DL", "zip": "110020"},
            "pricing": {"totalSqFt": 20000, "ratePerSqFtPerMonth": 22.5},
        }, headers=owner_h)
        assert created.status_code == 201
        listing_id = created.json()["id"]
        assert created.json()["status"] == "DRAFT"

        published = client.put(f"/api/v1/listings/{listing_id}", json={"status": "PUBLISHED"}, headers=owner_h)
        assert published.status_code == 200

        # Promoted warehouse waits for approval
        admin_list = client.get("/api/v1/admin/warehouses", headers=admin_h).json()
        assert len(admin_list) == 1
        promoted = admin_list[0]
        assert promoted["sourceListingId"] == listing_id
        assert promoted["isApproved"] is False
        assert promoted["owner"]["email"] == owner.email
        assert promoted["description"].endswith(origin_marker(listing_id))
        assert client.get("/api/v1/warehouses").json()["warehouses"] == []

        blocked = client.post("/api/v1/bookings", json={"warehouseId": promoted["id"]}, headers=merchant_h)
        assert blocked.status_code == 400

        approved = client.put(
            f"/api/v1/admin/warehouses/{promoted['id']}/approve", json={"isApproved": True}, headers=admin_h
        )
        assert approved.json()["isApproved"] is True

        # Merchant books, owner accepts
        booking = client.post("/api/v1/bookings", json={"warehouseId": promoted["id"]}, headers=merchant_h)
        assert booking.status_code == 201
        booking_id = booking.json()["id"]
        assert booking.json()["status"] == "pending"

        assert client.put(
            f"/api/v1/bookings/{booking_id}", json={"status": "accepted"}, headers=merchant_h
        ).status_code == 403

        accepted = client.put(f"/api/v1/bookings/{booking_id}", json={"status": "accepted"}, headers=owner_h)
        assert accepted.json()["status"] == "accepted"

        refused = client.put(f"/api/v1/bookings/{booking_id}", json={"status": "rejected"}, headers=owner_h)
        assert refused.status_code == 422

        bad = client.put(f"/api/v1/bookings/{booking_id}", json={"status": "approved"}, headers=owner_h)
        assert bad.status_code == 400

        # Owner note reaches the merchant
        note = client.post(
            "/api/v1/bookings/message",
            json={"bookingId": booking_id, "message": "Gate 3, after 10am"},
            headers=owner_h,
        )
        assert note.json() == {"ok": True}
        assert notifier.sent[0]["to"] == merchant.email

        detail = client.get(f"/api/v1/bookings/{booking_id}", headers=merchant_h).json()
        assert [h["status"] for h in detail["statusHistory"]] == ["pending", "accepted", "accepted"]
        assert detail["statusHistory"][-1]["note"] == "OWNER_MSG: Gate 3, after 10am"
        assert detail["warehouse"]["owner"]["contactNumber"] is None

        merchant_list = client.get(f"/api/v1/bookings/merchant/{merchant.id}", headers=merchant_h).json()
        assert [b["id"] for b in merchant_list] == [booking_id]
        assert client.get(f"/api/v1/bookings/owner/{owner.id}", headers=merchant_h).status_code == 403

    def test_message_for_missing_booking(self, client, owner, auth_headers):
        response = client.post(
            "/api/v1/bookings/message", json={"bookingId": 999, "message": "hi"}, headers=auth_headers(owner)
        )
        assert response.status_code == 404


class TestAdmin:
    def test_requires_admin(self, client, owner, auth_headers):
        assert client.get("/api/v1/admin/users", headers=auth_headers(owner)).status_code == 403

    def test_users_carry_primary_role(self, client, admin, merchant, auth_headers):
        users = client.get("/api/v1/admin/users", headers=auth_headers(admin)).json()
        roles = {u["email"]: u["role"] for u in users}
        assert roles == {admin.email: "admin", merchant.email: "merchant"}

    def test_grant_role_adds_to_set(self, client, admin, merchant, auth_headers):
        response = client.put(
            f"/api/v1/admin/users/{merchant.id}/role", json={"role": "warehouse_owner"}, headers=auth_headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["roles"] == ["MERCHANT", "WAREHOUSE_OWNER"]
        assert response.json()["role"] == "owner"

        unknown = client.put(
            f"/api/v1/admin/users/{merchant.id}/role", json={"role": "ROOT"}, headers=auth_headers(admin)
        )
        assert unknown.status_code == 400

    def test_delete_user(self, client, db, admin, make_user, make_listing, make_warehouse, auth_headers):
        doomed = make_user(["WAREHOUSE_OWNER"])
        make_listing(doomed)
        make_warehouse(doomed)
        doomed_id = doomed.id

        response = client.delete(f"/api/v1/admin/users/{doomed_id}", headers=auth_headers(admin))

        assert response.json() == {"ok": True}
        db.expire_all()
        assert db.query(User).filter(User.id == doomed_id).first() is None
        assert db.query(Warehouse).count() == 0
        assert db.query(Listing).count() == 0

    def test_user_with_bookings_cannot_be_deleted(self, client, db, admin, owner, merchant, make_warehouse, auth_headers):
        warehouse = make_warehouse(owner)
        db.add(Booking(warehouse_id=warehouse.id, merchant_id=merchant.id, status="PENDING"))
        db.commit()

        assert client.delete(f"/api/v1/admin/users/{merchant.id}", headers=auth_headers(admin)).status_code == 409
        assert client.delete(f"/api/v1/admin/users/{owner.id}", headers=auth_headers(admin)).status_code == 409

    def test_admin_cannot_delete_self(self, client, admin, auth_headers):
        assert client.delete(f"/api/v1/admin/users/{admin.id}", headers=auth_headers(admin)).status_code == 400

    def test_disable_hides_from_catalogue(self, client, admin, owner, make_warehouse, auth_headers):
        warehouse = make_warehouse(owner)

        response = client.put(
            f"/api/v1/admin/warehouses/{warehouse.id}/disable",
            json={"isDisabledByAdmin": True},
            headers=auth_headers(admin),
        )

        assert response.json()["isDisabledByAdmin"] is True
        assert client.get("/api/v1/warehouses").json()["warehouses"] == []

    def test_backfill_endpoint(self, client, db, admin, owner, make_listing, auth_headers):
        listing = make_listing(owner, status="PUBLISHED")
        headers = auth_headers(admin)

        dry = client.post("/api/v1/admin/listings/backfill", params={"dry_run": True}, headers=headers).json()
        assert (dry["dryRun"], dry["created"], dry["skipped"]) == (True, 1, 0)
        assert db.query(Warehouse).count() == 0

        wet = client.post("/api/v1/admin/listings/backfill", headers=headers).json()
        assert (wet["created"], wet["skipped"]) == (1, 0)
        assert wet["items"][0]["listingId"] == listing.id

        again = client.post("/api/v1/admin/listings/backfill", headers=headers).json()
        assert (again["created"], again["skipped"]) == (0, 1)

    def test_admin_bookings_overview(self, client, db, admin, owner, merchant, make_warehouse, auth_headers):
        warehouse = make_warehouse(owner)
        db.add(Booking(warehouse_id=warehouse.id, merchant_id=merchant.id, status="PENDING"))
        db.commit()

        bookings = client.get("/api/v1/admin/bookings", headers=auth_headers(admin)).json()

        assert len(bookings) == 1
        assert bookings[0]["merchant"]["email"] == merchant.email
        assert bookings[0]["warehouse"]["id"] == warehouse.id


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
