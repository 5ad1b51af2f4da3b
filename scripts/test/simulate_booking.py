"""
Exercise a running backend: log in, fill a leg until it is full, settle a trip.
Usage: python scripts/test/simulate_booking.py --vehicle 1 --password admin
"""

import argparse
import uuid
from datetime import date
import requests

BACKEND_URL = "http://localhost:8080/api/v1"


def login_owner(password):
    resp = requests.post(f"{BACKEND_URL}/auth/owner", json={"password": password}, timeout=10)
    resp.raise_for_status()
    return {"X-Session-Token": resp.json()["token"]}


def fill_leg(headers, vehicle_id, travel_date, direction, seats_per_booking):
    n = 0
    while True:
        n += 1
        body = {
            "name": f"Passenger {n}",
            "phone": f"2000{n:04d}",
            "direction": direction,
            "travel_date": travel_date,
            "vehicle_id": vehicle_id,
            "seats_count": seats_per_booking,
        }
        resp = requests.post(f"{BACKEND_URL}/passengers", json=body, headers=headers, timeout=10)
        if resp.status_code == 409:
            print(f"Leg full → HTTP 409: {resp.json()}")
            return
        resp.raise_for_status()
        print(f"Booked {seats_per_booking} seat(s) → reservation {resp.json()['id']}")


def settle_trip(headers, vehicle_id, travel_date, revenue, fuel, km):
    body = {
        "vehicle_id": vehicle_id,
        "trip_date": travel_date,
        "revenue": revenue,
        "fuel_cost": fuel,
        "km_traveled": km,
        "request_id": str(uuid.uuid4()),
    }
    for attempt in (1, 2):   # second call must not move the odometer again
        resp = requests.post(f"{BACKEND_URL}/trips", json=body, headers=headers, timeout=10)
        resp.raise_for_status()
        trip = resp.json()
        print(f"Attempt {attempt}: trip {trip['id']} share={trip['driver_share']} net={trip['net_profit']}")
    vehicle = requests.get(f"{BACKEND_URL}/vehicles/{vehicle_id}", headers=headers, timeout=10).json()
    print(f"Odometer now {vehicle['current_odometer']} km")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate bookings and a trip settlement")
    parser.add_argument("--vehicle", type=int, required=True)
    parser.add_argument("--password", default="admin")
    parser.add_argument("--date", default=date.today().isoformat())
    parser.add_argument("--direction", default="outbound", choices=["outbound", "inbound"])
    parser.add_argument("--seats", type=int, default=3)
    parser.add_argument("--revenue", default="100.000")
    parser.add_argument("--fuel", default="10.000")
    parser.add_argument("--km", type=int, default=50)
    args = parser.parse_args()

    auth = login_owner(args.password)
    fill_leg(auth, args.vehicle, args.date, args.direction, args.seats)
    settle_trip(auth, args.vehicle, args.date, args.revenue, args.fuel, args.km)
