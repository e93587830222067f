from enum import Enum


DEFAULT_MESSAGE = "An error occurred"
INTERNAL_MESSAGE = "Internal Server Error"


class ErrorKind(str, Enum):
    REMOTE = "remote"
    VALIDATION = "validation"
    IDENTITY = "identity"


class GatewayError(Exception):
    """
    The single error shape surfaced by the gateway.

    `kind` tells call sites where the failure came from without inspecting
    the message:
    - REMOTE: a downstream service failed or could not be reached
    - VALIDATION: the request lacked something required
    - IDENTITY: the credential could not be decoded
    """

    def __init__(self, kind: ErrorKind, status: int = 500, message: str = None, payload=None):
        self.kind = kind
        self.status = status
        self.message = message or DEFAULT_MESSAGE
        # Raw downstream body, kept for callers that treat some failures as answers
        self.payload = payload
        super().__init__(self.message)

    @classmethod
    def remote(cls, status: int, message: str = None, payload=None) -> 'GatewayError':
        return cls(ErrorKind.REMOTE, status, message, payload)

    @classmethod
    def unreachable(cls) -> 'GatewayError':
        return cls(ErrorKind.REMOTE, 500, INTERNAL_MESSAGE)

    @classmethod
    def validation(cls, message: str) -> 'GatewayError':
        return cls(ErrorKind.VALIDATION, 400, message)

    @classmethod
    def unresolved(cls, message: str) -> 'GatewayError':
        # Generic failure at the boundary, unlike other validation errors
        return cls(ErrorKind.VALIDATION, 500, message)

    @classmethod
    def identity(cls, message: str) -> 'GatewayError':
        return cls(ErrorKind.IDENTITY, 401, message)

    @property
    def is_not_found(self) -> bool:
        return self.kind == ErrorKind.REMOTE and self.status == 404

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "message": self.message
        }

    def __repr__(self) -> str:
        return f"GatewayError(kind={self.kind.value!r}, status={self.status}, message={self.message!r})"
