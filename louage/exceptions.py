# louage/exceptions.py
"""
Domain errors raised by the services.
Every one of them is recoverable by the caller except DataUnavailable,
which means the database itself could not be reached.
main.py maps each class to an HTTP status code.
"""

from typing import Optional


class LouageError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "detail": self.message}


class CapacityExceeded(LouageError):
    status_code = 409

    def __init__(self, remaining: int):
        super().__init__(f"Not enough seats left on this leg ({remaining} remaining)")
        self.remaining = remaining

    def to_dict(self) -> dict:
        return {**super().to_dict(), "remaining": self.remaining}


class InvalidCredentials(LouageError):
    status_code = 401

    def __init__(self):
        super().__init__("Invalid credentials")


class NotAuthenticated(LouageError):
    status_code = 401

    def __init__(self):
        super().__init__("Missing or expired session token")


class Forbidden(LouageError):
    status_code = 403


class UnknownVehicle(LouageError):
    status_code = 404

    def __init__(self, vehicle_id):
        super().__init__(f"Vehicle {vehicle_id} does not exist")
        self.vehicle_id = vehicle_id


class NotFound(LouageError):
    status_code = 404

    def __init__(self, collection: str, record_id):
        super().__init__(f"{collection} record {record_id} not found")
        self.collection = collection
        self.record_id = record_id


class VehicleInUse(LouageError):
    status_code = 409

    def __init__(self, vehicle_id, driver_count: int, history_count: int = 0):
        super().__init__(
            f"Vehicle {vehicle_id} is still referenced by {driver_count} driver account(s) "
            f"and {history_count} trip/booking record(s)"
        )
        self.vehicle_id = vehicle_id
        self.driver_count = driver_count
        self.history_count = history_count

    def to_dict(self) -> dict:
        return {**super().to_dict(), "driver_count": self.driver_count, "history_count": self.history_count}


class ValidationError(LouageError):
    status_code = 422

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid value for '{field}'")
        self.field = field

    def to_dict(self) -> dict:
        return {**super().to_dict(), "field": self.field}


class DataUnavailable(LouageError):
    status_code = 503

    def __init__(self, reason: str = ""):
        super().__init__("Data unavailable" + (f": {reason}" if reason else ""))
