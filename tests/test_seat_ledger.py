"""Unit tests for the seat ledger: capacity per leg, edits, cancellations."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date
from louage.exceptions import CapacityExceeded, NotFound, UnknownVehicle, ValidationError
from louage.models.passenger import Direction, Passenger
from louage.models.seat_leg import SeatLeg
from louage.schemas.passenger import PassengerCreate
from louage.services import seat_ledger

TRAVEL_DATE = date(2024, 5, 1)


def booking(vehicle_id, seats=1, direction=Direction.OUTBOUND, name="Amel", phone="22123456",
            travel_date=TRAVEL_DATE):
    return PassengerCreate(name=name, phone=phone, direction=direction, travel_date=travel_date,
                           vehicle_id=vehicle_id, seats_count=seats)


class TestCapacity:
    def test_accepts_bookings_up_to_capacity(self, db, vehicle):
        for seats in (3, 3, 2):
            seat_ledger.reserve(db, booking(vehicle.id, seats))

        assert seat_ledger.occupied_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 8
        assert seat_ledger.remaining_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 0

    def test_overbooking_rejected_with_remaining_seats(self, db, vehicle):
        seat_ledger.reserve(db, booking(vehicle.id, 6))

        with pytest.raises(CapacityExceeded) as exc:
            seat_ledger.reserve(db, booking(vehicle.id, 3, name="Late"))

        assert exc.value.remaining == 2

    def test_rejected_booking_writes_nothing(self, db, vehicle):
        seat_ledger.reserve(db, booking(vehicle.id, 7))

        with pytest.raises(CapacityExceeded):
            seat_ledger.reserve(db, booking(vehicle.id, 2, name="Late"))

        assert db.query(Passenger).count() == 1
        leg = db.query(SeatLeg).one()
        assert leg.occupied_seats == 7

    def test_sequence_never_exceeds_capacity(self, db, vehicle):
        accepted = 0
        for seats in (2, 5, 3, 1, 4, 1, 1):
            try:
                seat_ledger.reserve(db, booking(vehicle.id, seats))
                accepted += seats
            except CapacityExceeded:
                pass

        assert accepted == 8
        assert seat_ledger.occupied_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 8

    def test_directions_are_independent(self, db, vehicle):
        seat_ledger.reserve(db, booking(vehicle.id, 8, Direction.OUTBOUND))

        assert seat_ledger.remaining_seats(db, vehicle.id, TRAVEL_DATE, Direction.INBOUND) == 8
        seat_ledger.reserve(db, booking(vehicle.id, 8, Direction.INBOUND))
        assert seat_ledger.remaining_seats(db, vehicle.id, TRAVEL_DATE, Direction.INBOUND) == 0

    def test_vehicles_and_dates_are_independent(self, db, vehicle, other_vehicle):
        seat_ledger.reserve(db, booking(vehicle.id, 8))
        seat_ledger.reserve(db, booking(other_vehicle.id, 8))
        seat_ledger.reserve(db, booking(vehicle.id, 8, travel_date=date(2024, 5, 2)))

        assert db.query(Passenger).count() == 3

    def test_stale_counter_still_blocks_overbooking(self, db, vehicle):
        seat_ledger.reserve(db, booking(vehicle.id, 5))
        # Another writer already took the remaining seats on the shared counter
        db.query(SeatLeg).update({SeatLeg.occupied_seats: 8})
        db.commit()

        with pytest.raises(CapacityExceeded):
            seat_ledger.reserve(db, booking(vehicle.id, 1, name="Racer"))


class TestEdits:
    def test_resize_excludes_own_seats(self, db, vehicle):
        p = seat_ledger.reserve(db, booking(vehicle.id, 3))

        updated = seat_ledger.reserve(db, booking(vehicle.id, 5), reservation_id=p.id)

        assert updated.id == p.id
        assert updated.seats_count == 5
        assert seat_ledger.occupied_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 5

    def test_resize_rejected_when_others_hold_the_seats(self, db, vehicle):
        p = seat_ledger.reserve(db, booking(vehicle.id, 3))
        seat_ledger.reserve(db, booking(vehicle.id, 4, name="Other"))

        with pytest.raises(CapacityExceeded) as exc:
            seat_ledger.reserve(db, booking(vehicle.id, 5), reservation_id=p.id)

        assert exc.value.remaining == 4
        db.refresh(p)
        assert p.seats_count == 3

    def test_shrinking_always_fits(self, db, vehicle):
        p = seat_ledger.reserve(db, booking(vehicle.id, 8))

        seat_ledger.reserve(db, booking(vehicle.id, 2), reservation_id=p.id)

        assert seat_ledger.remaining_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 6

    def test_moving_to_other_direction_frees_old_leg(self, db, vehicle):
        p = seat_ledger.reserve(db, booking(vehicle.id, 4, Direction.OUTBOUND))

        seat_ledger.reserve(db, booking(vehicle.id, 4, Direction.INBOUND), reservation_id=p.id)

        assert seat_ledger.occupied_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 0
        assert seat_ledger.occupied_seats(db, vehicle.id, TRAVEL_DATE, Direction.INBOUND) == 4
        seat_ledger.reserve(db, booking(vehicle.id, 8, Direction.OUTBOUND, name="Full van"))

    def test_update_unknown_reservation(self, db, vehicle):
        with pytest.raises(NotFound):
            seat_ledger.reserve(db, booking(vehicle.id, 1), reservation_id=999)


class TestCancel:
    def test_cancel_gives_seats_back(self, db, vehicle):
        p = seat_ledger.reserve(db, booking(vehicle.id, 8))

        seat_ledger.cancel(db, p.id)

        assert db.query(Passenger).count() == 0
        assert seat_ledger.remaining_seats(db, vehicle.id, TRAVEL_DATE, Direction.OUTBOUND) == 8
        seat_ledger.reserve(db, booking(vehicle.id, 8, name="Next"))

    def test_cancel_missing(self, db):
        with pytest.raises(NotFound):
            seat_ledger.cancel(db, 42)


class TestValidation:
    @pytest.mark.parametrize("kwargs, field", [
        ({"name": "  "}, "name"),
        ({"phone": ""}, "phone"),
        ({"seats": 0}, "seats_count"),
        ({"seats": 9}, "seats_count"),
    ])
    def test_invalid_input(self, db, vehicle, kwargs, field):
        with pytest.raises(ValidationError) as exc:
            seat_ledger.reserve(db, booking(vehicle.id, **kwargs))
        assert exc.value.field == field
        assert db.query(Passenger).count() == 0

    def test_unknown_vehicle(self, db):
        with pytest.raises(UnknownVehicle):
            seat_ledger.reserve(db, booking(404, 1))

    def test_list_filters_by_day(self, db, vehicle):
        seat_ledger.reserve(db, booking(vehicle.id, 1, name="Today"))
        seat_ledger.reserve(db, booking(vehicle.id, 1, name="Tomorrow", travel_date=date(2024, 5, 2)))

        names = [p.name for p in seat_ledger.list_reservations(db, travel_date=TRAVEL_DATE)]
        assert names == ["Today"]
