"""Service-layer errors carrying the HTTP status they map to."""


class ServiceError(Exception):
    """Base error raised by services; rendered as {"error": message}."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class BadRequestError(ServiceError):
    """Missing, malformed or out-of-range input."""

    status_code = 400


class ConflictError(ServiceError):
    """Uniqueness violation (duplicate email, owner already has a store)."""

    status_code = 400


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""

    status_code = 404


class AuthenticationError(ServiceError):
    """Credentials rejected (wrong email or password)."""

    status_code = 401
