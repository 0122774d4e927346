# storefront/domain/errors.py


class StorefrontError(Exception):
    """Bazowy blad domeny, status_code mapowany na odpowiedz HTTP w routerach."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    status_code = 404


class InvalidArgumentError(StorefrontError):
    status_code = 400


class InvalidCouponError(InvalidArgumentError):
    """Nieznany, zuzyty, nieaktywny lub przeterminowany kupon."""


class NotApplicableError(StorefrontError):
    status_code = 400


class ConflictError(StorefrontError):
    status_code = 409


class UnauthorizedError(StorefrontError):
    status_code = 401


class ForbiddenError(StorefrontError):
    status_code = 403


class UpstreamError(StorefrontError):
    status_code = 502
