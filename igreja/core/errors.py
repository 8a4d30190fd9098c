"""
Error types shared by the backend adapter and the entity access layer
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError


class BackendError(Exception):
    """Failure reported by the hosted backend (query, storage or auth)"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"


class NotFoundError(BackendError):
    """A lookup that expected exactly one row found none"""

    def __init__(self, message: str = "Row not found", details: Optional[str] = None):
        super().__init__(message, code="PGRST116", details=details)


class AuthErrorKind(str, Enum):
    """Typed auth failure kinds"""
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_UNCONFIRMED = "email_unconfirmed"
    ALREADY_REGISTERED = "already_registered"
    WEAK_PASSWORD = "weak_password"
    UNKNOWN = "unknown"


class AuthError(BackendError):
    """Auth interface failure carrying its kind"""

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None):
        super().__init__(message or kind.value, code=kind.value)
        self.kind = kind


class NotAuthenticated(Exception):
    """Operation needs a signed-in profile with a tenant"""

    def __init__(self, message: str = "Usuário não autenticado"):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class FieldError:
    """One failing field: dotted path and message"""
    path: str
    message: str


class ValidationFailed(Exception):
    """Schema validation failed before any backend call"""

    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__("; ".join(f"{e.path}: {e.message}" for e in errors))

    @classmethod
    def from_pydantic(cls, exc: ValidationError, prefix: str = "") -> "ValidationFailed":
        errors = []
        for err in exc.errors():
            path = ".".join(str(part) for part in err["loc"]) or "__root__"
            if prefix:
                path = f"{prefix}.{path}"
            message = err["msg"]
            # "Value error, <msg>" is how pydantic wraps ValueError raised by validators
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.append(FieldError(path=path, message=message))
        return cls(errors)

    @property
    def paths(self) -> List[str]:
        return [e.path for e in self.errors]


class PermissionDenied(Exception):
    """The signed-in role may not perform the operation"""

    def __init__(self, message: str = "Acesso negado"):
        super().__init__(message)
        self.message = message
