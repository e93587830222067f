import logging
from typing import Any

from .errors import GatewayError
from .models import UserRecord, UserRef
from .service_client import ServiceClient

logger = logging.getLogger(__name__)


def _expect_object(data: Any, call: str) -> dict:
    if not isinstance(data, dict):
        logger.error(f"Malformed response from {call}: {data!r}")
        raise GatewayError.unreachable()
    return data


class UsersService:
    """Remote contract of the users service."""

    def __init__(self, client: ServiceClient):
        self.client = client

    def sign_up(self, details: dict) -> Any:
        return self.client.post('/signup', details)

    def sign_in(self, details: dict) -> Any:
        return self.client.post('/signin', details)

    def get_user(self, user_id: str) -> UserRecord:
        data = _expect_object(self.client.get(f'/getuser/{user_id}'), 'getuser')
        return UserRecord.from_dict(data, user_id=user_id)

    def create_temp(self, username: str) -> UserRef:
        data = _expect_object(self.client.post('/createtemp', {'username': username}), 'createtemp')
        return UserRef(id=data.get('id') or data.get('_id'), username=data.get('username'))

    def delete_temp(self, user_id: str) -> Any:
        return self.client.delete(f'/deletetemp/{user_id}')


class RoomsService:
    """Remote contract of the rooms service."""

    def __init__(self, client: ServiceClient):
        self.client = client

    def get_owned_room(self, user_id: str) -> Any:
        return self.client.get(f'/{user_id}/getownedroom')

    def join(self, room_code: str, user: UserRef) -> Any:
        return self.client.post(f'/{room_code}/join', user.to_dict())

    def create(self, user: UserRef) -> Any:
        return self.client.put('/create', user.to_dict())

    def delete(self, room_code: str) -> Any:
        return self.client.delete(f'/{room_code}/delete')

    def leave(self, user_id: str) -> Any:
        return self.client.post('/leave', {'_id': user_id})

    def get_role(self, user_id: str) -> Any:
        return self.client.get(f'/{user_id}/getrole')

    def start_game(self, user_id: str, settings=None) -> Any:
        return self.client.post('/startgame', {'_id': user_id, 'settings': settings})

    def end_game(self, user_id: str) -> Any:
        return self.client.post('/endgame', {'_id': user_id})
