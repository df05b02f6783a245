from typing import Optional


class FunctionalServiceError(Exception):
    pass


class NotRegisteredError(FunctionalServiceError):
    pass


class JobValidationError(FunctionalServiceError, ValueError):
    pass


class AuthorizationError(FunctionalServiceError):
    pass


class UnsupportedOperationError(FunctionalServiceError):
    status_code = 403


class PhaseConflictError(FunctionalServiceError):
    pass


class RegistrationError(FunctionalServiceError):
    pass


class MarshallingError(FunctionalServiceError, ValueError):
    pass


class TransportError(FunctionalServiceError):
    pass


class HttpStatusError(TransportError):
    def __init__(self, status_code: int, url: str, body: Optional[str] = None) -> None:
        super().__init__(f"{status_code} returned by {url}")
        self.status_code = status_code
        self.url = url
        self.body = body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404
