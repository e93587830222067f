from typing import Optional

from .downstream import UsersService
from .errors import GatewayError
from .models import UserRef
from .token_verifier import TokenVerifier


class IdentityResolver:
    """
    Turns whatever the caller presented into a canonical user.

    A request identifies its caller either with a signed access token or,
    for anonymous players, with a bare username that becomes a temporary
    account. Nothing here retries; remote failures propagate as raised.
    """

    def __init__(self, users: UsersService, verifier: TokenVerifier):
        self.users = users
        self.verifier = verifier

    def resolve_signed_in(self, credential: Optional[str]) -> UserRef:
        """Decode the credential and look up the username it belongs to."""
        user_id = self.verifier.decode(credential)
        user = self.users.get_user(user_id)
        return UserRef(id=user_id, username=user.username)

    def resolve_or_create_temp(self, username: str) -> UserRef:
        """Create a temporary account for an anonymous player."""
        return self.users.create_temp(username)

    def normalize_id(self, explicit_id: Optional[str], credential: Optional[str]) -> str:
        """
        Pick the single user id a request acts on.

        An explicit id wins and costs no remote call. Otherwise the
        credential is resolved to its user.
        """
        if explicit_id:
            return explicit_id
        if credential:
            return self.resolve_signed_in(credential).id
        raise GatewayError.unresolved("No ID present")
