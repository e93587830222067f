from dataclasses import dataclass, field
from typing import List, Optional


def _as_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return value is True or value == 1


@dataclass
class UserRef:
    """Canonical identity used for every downstream call in one request."""
    id: str
    username: str

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "username": self.username
        }


@dataclass
class UserRecord:
    id: str
    username: str
    logged_in: bool = False

    @property
    def is_temporary(self) -> bool:
        return not self.logged_in

    @classmethod
    def from_dict(cls, data: dict, user_id: str = None) -> 'UserRecord':
        data = data or {}
        return cls(
            id=data.get("_id") or data.get("id") or user_id,
            username=data.get("username"),
            logged_in=_as_flag(data.get("logged_in"))
        )


@dataclass
class Player:
    user_id: str


@dataclass
class RoomRef:
    code: str
    players: List[Player] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> Optional['RoomRef']:
        """Build a room from a rooms-service payload, or None when it names no room."""
        if not isinstance(data, dict) or not data.get("room_code"):
            return None
        players = [Player(user_id=p.get("user_id")) for p in data.get("players") or []]
        return cls(code=data["room_code"], players=players)
