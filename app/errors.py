# app/errors.py
"""
Error taxonomy shared by the warranty services.
Each error carries the HTTP status it maps to; main.py turns them into JSON responses.
"""


class WarrantyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(WarrantyError):
    """Vehicle, model, component or part does not exist."""
    status_code = 404


class ValidationError(WarrantyError):
    """Missing required field or non-positive duration/limit."""
    status_code = 400


class ConflictError(WarrantyError):
    """Explicit assignment of a component the vehicle already holds."""
    status_code = 409


class DependencyUnavailableError(WarrantyError):
    """Storage or ledger unreachable while a write was required."""
    status_code = 503
