#!/usr/bin/env python3
"""
Smoke test against a running API seeded with scripts/seed_demo_data.py
Run from the project root: python scripts/smoke_test_api.py [base_url]

Walks the main marketplace flow: publish a listing, approve the promoted
warehouse, book it, accept the booking and message the merchant.
"""

import sys
import asyncio
from datetime import datetime

import httpx

BASE_URL = "http://localhost:5000/api/v1"
DEMO_PASSWORD = "Demo@1234"
USERS = {
    "merchant": "priya.merchant@example.com",
    "owner": "arjun.ownermerchant@example.com",
    "admin": "admin@example.com",
}


class SmokeTester:
    def __init__(self, base_url: str = BASE_URL):
        self.client = httpx.AsyncClient(base_url=base_url, timeout=15.0)
        self.tokens = {}
        self.failures = 0

    async def close(self):
        await self.client.aclose()

    def headers(self, role: str):
        return {"Authorization": f"Bearer {self.tokens[role]}"}

    def check(self, label: str, response: httpx.Response, expected: int = 200) -> dict:
        if response.status_code == expected:
            print(f"✅ {label}")
        else:
            self.failures += 1
            print(f"❌ {label}: {response.status_code} {response.text[:200]}")
        try:
            return response.json()
        except ValueError:
            return {}

    async def login_all_users(self) -> bool:
        print("🔐 Logging in demo users...")
        for role, email in USERS.items():
            response = await self.client.post("/auth/login", json={"email": email, "password": DEMO_PASSWORD})
            data = self.check(f"login {role}", response)
            if "token" not in data:
                return False
            self.tokens[role] = data["token"]
        return True

    async def run(self) -> int:
        if not await self.login_all_users():
            return 1

        data = self.check("public catalogue", await self.client.get("/warehouses", params={"take": 5}))
        print(f"   📦 {len(data.get('warehouses', []))} warehouse(s) listed")

        self.check("search", await self.client.get("/warehouses/search", params={"q": "mumbai", "minSqFt": ""}))
        self.check(
            "search rejects non-numeric bound",
            await self.client.get("/warehouses/search", params={"minSqFt": "abc"}),
            expected=400
        )

        # Listing → warehouse promotion
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        listing = self.check("create draft listing", await self.client.post(
            "/listings",
            json={
                "title": f"Smoke Test Storage {stamp}",
                "description": "Created by the smoke test",
                "address": {"addressLine1": "1 Test Road", "city": "Delhi", "state": "DL", "zip": "110001"},
                "pricing": {"totalSqFt": 5000, "ratePerSqFtPerMonth": 19.5},
            },
            headers=self.headers("owner")
        ), expected=201)
        if "id" not in listing:
            return 1

        self.check("publish listing", await self.client.put(
            f"/listings/{listing['id']}", json={"status": "PUBLISHED"}, headers=self.headers("owner")
        ))

        warehouses = self.check("admin warehouses", await self.client.get("/admin/warehouses", headers=self.headers("admin")))
        promoted = next((w for w in warehouses if w.get("sourceListingId") == listing["id"]), None)
        if promoted is None:
            self.failures += 1
            print("❌ promoted warehouse not found")
            return 1
        print(f"   🏭 listing #{listing['id']} → warehouse #{promoted['id']} (approved={promoted['isApproved']})")

        self.check("merchant cannot book unapproved warehouse", await self.client.post(
            "/bookings", json={"warehouseId": promoted["id"]}, headers=self.headers("merchant")
        ), expected=400)

        self.check("admin approves", await self.client.put(
            f"/admin/warehouses/{promoted['id']}/approve", json={"isApproved": True}, headers=self.headers("admin")
        ))

        # Booking workflow
        booking = self.check("merchant books", await self.client.post(
            "/bookings", json={"warehouseId": promoted["id"]}, headers=self.headers("merchant")
        ), expected=201)
        if "id" not in booking:
            return 1

        self.check("merchant cannot accept", await self.client.put(
            f"/bookings/{booking['id']}", json={"status": "accepted"}, headers=self.headers("merchant")
        ), expected=403)
        self.check("owner accepts", await self.client.put(
            f"/bookings/{booking['id']}", json={"status": "accepted"}, headers=self.headers("owner")
        ))
        self.check("accepted → rejected is refused", await self.client.put(
            f"/bookings/{booking['id']}", json={"status": "rejected"}, headers=self.headers("owner")
        ), expected=422)
        self.check("owner messages merchant", await self.client.post(
            "/bookings/message",
            json={"bookingId": booking["id"], "message": "Gate 3, after 10am"},
            headers=self.headers("owner")
        ))

        detail = self.check("booking detail", await self.client.get(
            f"/bookings/{booking['id']}", headers=self.headers("merchant")
        ))
        for entry in detail.get("statusHistory", []):
            print(f"   🕒 {entry['status']} {entry.get('note') or ''}")

        print(f"\n{'🎉 All checks passed' if self.failures == 0 else f'⚠️ {self.failures} check(s) failed'}")
        return 0 if self.failures == 0 else 1


async def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else BASE_URL
    tester = SmokeTester(base_url)
    try:
        return await tester.run()
    finally:
        await tester.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
