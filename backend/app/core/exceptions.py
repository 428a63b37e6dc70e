"""
Custom Exceptions - Application-specific error types

Every error kind carries a stable ``code`` and its own HTTP ``status_code``
so the routing layer can map it without inspecting messages.
"""


class HabitTrackerException(Exception):
    """Base exception for all habit tracker errors"""
    code = "error"
    status_code = 500


class InvalidInputError(HabitTrackerException):
    """Raised when a name, id or other input is missing or malformed"""
    code = "invalid_input"
    status_code = 400


class InvalidDateError(HabitTrackerException):
    """Raised when a date string cannot be parsed"""
    code = "invalid_date"
    status_code = 422


class InvalidRangeError(HabitTrackerException):
    """Raised when a date range starts after it ends or is too long"""
    code = "invalid_range"
    status_code = 416


class HabitNotFoundError(HabitTrackerException):
    """Raised when a habit cannot be found for the requesting user"""
    code = "not_found"
    status_code = 404


class HabitAlreadyExistsError(HabitTrackerException):
    """Raised when attempting to create a duplicate active habit"""
    code = "already_exists"
    status_code = 409


class DatabaseError(HabitTrackerException):
    """Raised when database operations fail"""
    code = "store_error"
    status_code = 503
