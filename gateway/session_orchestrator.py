import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

from .downstream import RoomsService, UsersService
from .errors import GatewayError
from .identity import IdentityResolver
from .models import RoomRef, UserRecord

logger = logging.getLogger(__name__)


class SessionOrchestrator:
    """
    Multiplayer session lifecycle over the users and rooms services.

    Each operation is a short saga:
    - forward calls run in a fixed order
    - a temporary account created by a failed join is deleted again
    - temporary accounts are cleaned up when their room session ends

    Compensation is best-effort. Its own failure is logged and never
    replaces the error that triggered it. Nothing is persisted between
    calls, so a crash mid-saga can leave one side inconsistent.
    """

    def __init__(
        self,
        users: UsersService,
        rooms: RoomsService,
        identity: IdentityResolver,
        lookup_workers: int = 8
    ):
        self.users = users
        self.rooms = rooms
        self.identity = identity
        self.lookup_workers = lookup_workers

    # ==================== Accounts ====================

    def sign_up(self, details: dict) -> Any:
        return self.users.sign_up(details)

    def sign_in(self, details: dict) -> Any:
        return self.users.sign_in(details)

    def get_user_exists(self, user_id: str) -> bool:
        """True when the users service knows the id; any failure means False."""
        try:
            self.users.get_user(user_id)
        except GatewayError as e:
            logger.debug(f"User {user_id} lookup failed ({e.status}): treating as absent")
            return False
        return True

    # ==================== Joining ====================

    def join(
        self,
        room_code: str,
        credential: Optional[str] = None,
        username: Optional[str] = None
    ) -> dict:
        """
        Add the caller to a room.

        A credential selects the signed-in path; otherwise a username
        selects the anonymous path, which creates a temporary account first.
        """
        if credential:
            user, message = self._join_signed_in(credential, room_code)
        elif username:
            user, message = self._join_temp(username, room_code)
        else:
            raise GatewayError.validation("Request does not contain the necessary information")

        return {
            'message': message,
            'details': user.to_dict()
        }

    def _join_signed_in(self, credential: str, room_code: str):
        user = self.identity.resolve_signed_in(credential)
        return user, self.rooms.join(room_code, user)

    def _join_temp(self, username: str, room_code: str):
        user = self.identity.resolve_or_create_temp(username)
        try:
            message = self.rooms.join(room_code, user)
        except GatewayError:
            self._discard_temp(user.id, reason=f"join of room {room_code} failed")
            raise
        return user, message

    def _discard_temp(self, user_id: str, reason: str):
        try:
            self.users.delete_temp(user_id)
        except GatewayError as e:
            logger.warning(f"Compensation failed: could not delete temp account {user_id} after {reason}: {e.message}")
        else:
            logger.info(f"Deleted temp account {user_id} after {reason}")

    # ==================== Leaving ====================

    def leave_room(self, user_id: str) -> None:
        """
        Take a user out of their room session.

        An owner's room is deleted together with its temporary players.
        Anyone else just leaves, and their own account goes too if it is
        temporary.
        """
        room = RoomRef.from_dict(self.get_owned_room(user_id))
        if room:
            self.rooms.delete(room.code)
            self._delete_temp_players(room)
        else:
            self._leave_room_not_owned(user_id)

    def _delete_temp_players(self, room: RoomRef):
        # Room deletion already happened; a failure here is not rolled back.
        for user in self._temp_players(room):
            self.users.delete_temp(user.id)
            logger.info(f"Deleted temp account {user.id} with room {room.code}")

    def _temp_players(self, room: RoomRef) -> List[UserRecord]:
        if not room.players:
            return []

        # Lookups share the transport; the production one keeps a Session per thread
        workers = max(1, min(self.lookup_workers, len(room.players)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            users = list(pool.map(lambda p: self.users.get_user(p.user_id), room.players))

        return [u for u in users if u.is_temporary]

    def _leave_room_not_owned(self, user_id: str):
        self.rooms.leave(user_id)

        user = self.users.get_user(user_id)
        if user.is_temporary:
            self.users.delete_temp(user_id)
            logger.info(f"Deleted temp account {user_id} after leaving")

    def get_owned_room(self, user_id: str) -> Any:
        """
        The room this user owns.

        The rooms service answers 404 when the user owns nothing; that body
        is returned as a normal result rather than raised.
        """
        try:
            return self.rooms.get_owned_room(user_id)
        except GatewayError as e:
            if e.is_not_found:
                return e.payload if isinstance(e.payload, dict) else {}
            raise

    # ==================== Rooms & games ====================

    def create_room(self, credential: Optional[str]) -> Any:
        user = self.identity.resolve_signed_in(credential)
        return self.rooms.create(user)

    def get_role(self, user_id: str) -> dict:
        user = self.users.get_user(user_id)
        role = self.rooms.get_role(user_id)
        return {
            'role': role,
            'username': user.username
        }

    def start_game(self, user_id: str, settings=None) -> Any:
        return self.rooms.start_game(user_id, settings)

    def end_game(self, user_id: str) -> Any:
        return self.rooms.end_game(user_id)
