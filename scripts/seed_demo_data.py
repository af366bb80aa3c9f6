#!/usr/bin/env python3
"""
Create tables and load demo users, warehouses and published listings.

Run from the project root: python scripts/seed_demo_data.py
Re-running is safe; existing rows (matched by email / owner+name / owner+title)
are left untouched.
"""
import os
import sys

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from warehub.config.database import Base, SessionLocal, engine
from warehub.core.auth.service import AuthService
from warehub.shared.database.models import User, Warehouse, Listing
from warehub.shared.enums import ListingStatus

DEMO_PASSWORD = "Demo@1234"

DEMO_USERS = [
    {"key": "priya", "name": "Priya Shah", "email": "priya.merchant@example.com",
     "roles": ["MERCHANT"], "contact_number": "9876543210"},
    {"key": "arjun", "name": "Arjun Mehta", "email": "arjun.ownermerchant@example.com",
     "roles": ["WAREHOUSE_OWNER", "MERCHANT"], "contact_number": "9812345678"},
    {"key": "neha", "name": "Neha Iyer", "email": "neha.owner@example.com",
     "roles": ["WAREHOUSE_OWNER"], "contact_number": "9822001122"},
    {"key": "rohit", "name": "Rohit Kumar", "email": "rohit.owner@example.com",
     "roles": ["WAREHOUSE_OWNER"], "contact_number": "9898989898"},
    {"key": "admin", "name": "Admin Singh", "email": "admin@example.com",
     "roles": ["ADMIN"], "contact_number": "9000000000"},
]

DEMO_WAREHOUSES = [
    {"owner": "arjun", "name": "Okhla Logistics Hub", "address": "A-12, Okhla Phase II",
     "city": "Delhi", "state": "DL", "pincode": "110020", "type": "DRY",
     "description": "Ambient storage with easy truck access. Internet + loading dock.",
     "total_space": 20000, "available_space": 14000, "price_per_sqft": 22.5,
     "latitude": 28.5355, "longitude": 77.3910,
     "image_url": "https://picsum.photos/seed/okhla-hub/800/400", "is_approved": True},
    {"owner": "neha", "name": "Navi Mumbai Cold Store", "address": "Plot 9, TTC Industrial Area",
     "city": "Mumbai", "state": "MH", "pincode": "400703", "type": "TEMP_CONTROLLED",
     "description": "2 temperature zones, ideal for pharma/food.",
     "total_space": 30000, "available_space": 18000, "price_per_sqft": 38.0,
     "latitude": 19.0330, "longitude": 73.0297,
     "image_url": "https://picsum.photos/seed/navi-cold/800/400", "is_approved": True},
    {"owner": "arjun", "name": "Bhiwandi Fulfillment Center", "address": "Kongaon, Bhiwandi",
     "city": "Thane", "state": "MH", "pincode": "421308", "type": "DRY",
     "description": "High throughput for e-commerce with racking.",
     "total_space": 45000, "available_space": 32000, "price_per_sqft": 18.5,
     "latitude": 19.2813, "longitude": 73.0483,
     "image_url": "https://picsum.photos/seed/bhiwandi-fulfillment/800/400", "is_approved": True},
    {"owner": "rohit", "name": "Peenya Industrial Shed", "address": "Phase 2, Peenya",
     "city": "Bengaluru", "state": "KA", "pincode": "560058", "type": "DRY",
     "description": "Ideal for light assembly & storage. Good power.",
     "total_space": 18000, "available_space": 9000, "price_per_sqft": 24.0,
     "latitude": 13.0309, "longitude": 77.5153,
     "image_url": "https://picsum.photos/seed/peenya-shed/800/400", "is_approved": True},
    {"owner": "neha", "name": "Guindy City Storage", "address": "SIDCO Industrial Estate, Guindy",
     "city": "Chennai", "state": "TN", "pincode": "600032", "type": "DRY",
     "description": "City-proximity storage for FMCG. Forklift available.",
     "total_space": 15000, "available_space": 7000, "price_per_sqft": 21.0,
     "latitude": 13.0108, "longitude": 80.2120,
     "image_url": "https://picsum.photos/seed/guindy-storage/800/400", "is_approved": False},
    {"owner": "rohit", "name": "Kompally Logistics Park", "address": "NH 44, Kompally",
     "city": "Hyderabad", "state": "TG", "pincode": "500014", "type": "DRY",
     "description": "Large bays, trailer parking, security cameras.",
     "total_space": 52000, "available_space": 41000, "price_per_sqft": 20.0,
     "latitude": 17.5463, "longitude": 78.4858,
     "image_url": "https://picsum.photos/seed/kompally-park/800/400", "is_approved": True},
    {"owner": "neha", "name": "Narol Distribution Center", "address": "Narol Industrial Area",
     "city": "Ahmedabad", "state": "GJ", "pincode": "382405", "type": "DRY",
     "description": "Good road connectivity, dock-levelers installed.",
     "total_space": 26000, "available_space": 15000, "price_per_sqft": 17.5,
     "latitude": 22.9606, "longitude": 72.6009,
     "image_url": "https://picsum.photos/seed/narol-dc/800/400", "is_approved": True},
    {"owner": "arjun", "name": "Chakan Auto Hub", "address": "MIDC, Chakan Phase 2",
     "city": "Pune", "state": "MH", "pincode": "410501", "type": "DRY",
     "description": "Auto ancillaries storage, wide access roads.",
     "total_space": 34000, "available_space": 19000, "price_per_sqft": 23.5,
     "latitude": 18.7519, "longitude": 73.8429,
     "image_url": "https://picsum.photos/seed/chakan-auto/800/400", "is_approved": False},
]

# Published wizard listings; run the backfill script afterwards to promote them
DEMO_LISTINGS = [
    {
        "owner": "arjun",
        "title": "Okhla Ambient Storage with Dock Access",
        "description": "Clean ambient storage ideal for consumer products/apparel. 7 days a week, forklift on site.",
        "address": {"addressLine1": "A-12, Okhla Phase II", "city": "Delhi", "state": "DL", "zip": "110020"},
        "use": {"facilityUse": "STORAGE_LIGHT", "otherUseNotes": ""},
        "amenities": {
            "security": {"gatedAccess": True, "onSiteGuards": False, "securitySystem": True, "securityCameras": True},
            "forklift": {"available": True, "isPaid": False, "maxWeightKg": 2000},
            "amenities": ["INTERNET", "LOADING_DOCK", "OFFICE_SPACE"],
        },
        "approvals": {
            "labourPolicy": {"renterLaborAllowed": True, "ownerLaborAvailable": True,
                             "includedInRent": False, "hourlyRate": 350},
            "approvedUses": ["CONSUMER_PRODUCTS", "APPAREL", "LOGISTICS_3PL"],
        },
        "qualifications": ["DRY"],
        "pricing": {"totalSqFt": 20000, "minSqFt": 1000, "ratePerSqFtPerMonth": 22.5},
        "hours": {"mode": "SEVEN_DAYS", "time": "LIMITED", "range": {"open": "09:00", "close": "18:00"},
                  "days": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]},
        "services": {
            "inbound": {"palletReceiving": {"available": True, "ratePerHour": 450}},
            "outbound": {"unitPickPack": {"available": True, "ratePerHour": 500}},
            "valueAdd": {"kitting": {"available": False, "ratePerHour": 0}},
        },
    },
    {
        "owner": "rohit",
        "title": "Peenya Shed for Light Assembly & Storage",
        "description": "Power-ready shed in Peenya with flexible hours. Great for small assembly + storage.",
        "address": {"addressLine1": "Phase 2, Peenya", "city": "Bengaluru", "state": "KA", "zip": "560058"},
        "use": {"facilityUse": "SMALL_ASSEMBLY", "otherUseNotes": ""},
        "amenities": {
            "security": {"gatedAccess": True, "onSiteGuards": True, "securitySystem": True, "securityCameras": True},
            "forklift": {"available": False, "isPaid": False, "maxWeightKg": 0},
            "amenities": ["SPECIALTY_POWER", "INTERNET", "RESTROOMS"],
        },
        "approvals": {
            "labourPolicy": {"renterLaborAllowed": True, "ownerLaborAvailable": False,
                             "includedInRent": False, "hourlyRate": 0},
            "approvedUses": ["ELECTRONICS", "GENERAL_WORK", "CONSUMER_PRODUCTS"],
        },
        "qualifications": ["DRY"],
        "pricing": {"totalSqFt": 18000, "minSqFt": 800, "ratePerSqFtPerMonth": 24.0},
        "hours": {"mode": "SELECTED", "time": "24H", "range": {"open": "00:00", "close": "23:59"},
                  "days": ["Mon", "Tue", "Wed", "Thu", "Fri"]},
        "services": {
            "inbound": {"cartonReceiving": {"available": True, "ratePerHour": 300}},
            "outbound": {"cartonPick": {"available": True, "ratePerHour": 350}},
            "valueAdd": {"ticketing": {"available": True, "ratePerHour": 280}},
        },
    },
]


def create_tables():
    """Create any missing tables from the ORM models"""
    print("🏗️ Creating tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tables ready")


def seed_users(db) -> dict:
    password_hash = AuthService.get_password_hash(DEMO_PASSWORD)
    users = {}

    for data in DEMO_USERS:
        user = db.query(User).filter(User.email == data["email"]).first()
        if user:
            print(f"ℹ️ User exists: {data['email']}")
        else:
            user = User(
                name=data["name"],
                email=data["email"],
                password_hash=password_hash,
                roles=data["roles"],
                contact_number=data["contact_number"],
                is_active=True
            )
            db.add(user)
            db.flush()
            print(f"✅ User created: {data['email']} ({', '.join(data['roles'])})")
        users[data["key"]] = user

    return users


def seed_warehouses(db, users: dict) -> int:
    created = 0
    for data in DEMO_WAREHOUSES:
        row = dict(data)
        owner = users[row.pop("owner")]
        exists = db.query(Warehouse.id).filter(
            Warehouse.owner_id == owner.id, Warehouse.name == row["name"]
        ).first()
        if exists:
            continue
        db.add(Warehouse(owner_id=owner.id, **row))
        created += 1
    return created


def seed_listings(db, users: dict) -> int:
    created = 0
    for data in DEMO_LISTINGS:
        row = dict(data)
        owner = users[row.pop("owner")]
        exists = db.query(Listing.id).filter(
            Listing.owner_id == owner.id, Listing.title == row["title"]
        ).first()
        if exists:
            continue
        db.add(Listing(owner_id=owner.id, status=ListingStatus.PUBLISHED.value, **row))
        created += 1
    return created


def main() -> int:
    create_tables()
    db = SessionLocal()

    try:
        users = seed_users(db)
        warehouses = seed_warehouses(db, users)
        listings = seed_listings(db, users)
        db.commit()

        print(f"\n🎉 Seed complete: {warehouses} warehouse(s), {listings} listing(s) added")
        print("\n📋 Demo accounts:")
        for data in DEMO_USERS:
            print(f"   👤 {'+'.join(data['roles'])}: {data['email']}")
        print(f"🔑 Demo password for all seeded users: {DEMO_PASSWORD}")
        return 0

    except Exception as e:
        db.rollback()
        print(f"❌ Seed failed: {e}")
        return 1

    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
