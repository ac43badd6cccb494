"""
Initialize database — creates parking slot and parking log tables.
Optionally registers N empty slots so analytics has a capacity to work with.
Usage: python scripts/setup/init_db.py [--slots 6]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from datetime import datetime
from sqlalchemy import inspect, text
from parking_analytics.database import create_tables, engine, SessionLocal
from parking_analytics.models.parking_slot import ParkingSlot
from parking_analytics.config import settings


def register_slots(count: int) -> int:
    """Add slots 1..count that don't exist yet. Returns how many were added."""
    db = SessionLocal()
    try:
        existing = {n for (n,) in db.query(ParkingSlot.slot_number).all()}
        added = 0
        for number in range(1, count + 1):
            if number in existing:
                continue
            db.add(ParkingSlot(slot_number=number, status="available", last_updated=datetime.utcnow()))
            added += 1
        db.commit()
        return added
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create analytics tables")
    parser.add_argument("--slots", type=int, default=0, help="Register slots 1..N if missing")
    args = parser.parse_args()

    print("🗄️  Parking Analytics DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = inspect(engine).get_table_names()
    print(f"✅ Tables ready ({len(tables)} total): {', '.join(sorted(tables))}")

    if args.slots:
        added = register_slots(args.slots)
        print(f"🅿️  Registered {added} new slot(s) (target {args.slots})")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn parking_analytics.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
