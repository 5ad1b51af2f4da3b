# scripts/setup/init_db.py
"""
Initialize database — creates all tables and the settings singleton.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--vehicle PLATE MODEL] [--driver NAME PASSWORD]
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text
from louage.database import SessionLocal, create_tables, engine
from louage.config import settings
from louage.services import registry_service
from louage.services.settings_service import get_settings


def main():
    parser = argparse.ArgumentParser(description="Create tables and optionally seed a vehicle + driver")
    parser.add_argument("--vehicle", nargs=2, metavar=("PLATE", "MODEL"))
    parser.add_argument("--driver", nargs=2, metavar=("NAME", "PASSWORD"))
    args = parser.parse_args()

    print("Louage DB Initialization")
    print("=" * 40)
    print(f"Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        sys.exit(1)

    print("\nCreating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   - {t}")

    db = SessionLocal()
    try:
        fleet = get_settings(db)
        print(f"\nSettings: driver share {fleet.driver_percentage}%, "
              f"oil change every {fleet.oil_change_interval_km} km")

        if args.vehicle:
            vehicle = registry_service.create_vehicle(db, args.vehicle[0], args.vehicle[1])
            print(f"Vehicle added: {vehicle.plate_number} (id={vehicle.id})")
            if args.driver:
                driver = registry_service.create_driver(db, args.driver[0], args.driver[1], vehicle.id)
                print(f"Driver added: {driver.name} (id={driver.id})")
        elif args.driver:
            print("--driver needs --vehicle to assign the account to")
    finally:
        db.close()

    print("\nDatabase ready! Start the backend with:")
    print(f"   uvicorn louage.main:app --host {settings.BACKEND_HOST} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
