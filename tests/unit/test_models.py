"""
Unit tests for gateway data models.
"""
from gateway.models import Player, RoomRef, UserRecord, UserRef


class TestRoomRef:

    def test_from_owned_room_payload(self):
        room = RoomRef.from_dict({'room_code': 'R1', 'players': [{'user_id': 'a'}, {'user_id': 'b'}]})

        assert room.code == 'R1'
        assert room.players == [Player('a'), Player('b')]

    def test_absence_payloads_name_no_room(self):
        assert RoomRef.from_dict({'message': 'No owned room'}) is None
        assert RoomRef.from_dict({}) is None
        assert RoomRef.from_dict(None) is None
        assert RoomRef.from_dict('Not found') is None

    def test_missing_players(self):
        assert RoomRef.from_dict({'room_code': 'R1', 'players': None}).players == []


class TestUserRecord:

    def test_temporary_when_not_logged_in(self):
        assert UserRecord.from_dict({'_id': 'u1', 'username': 'a', 'logged_in': False}).is_temporary
        assert UserRecord.from_dict({'_id': 'u1', 'username': 'a'}).is_temporary
        assert not UserRecord.from_dict({'_id': 'u1', 'username': 'a', 'logged_in': True}).is_temporary

    def test_string_flags(self):
        """Flags sent as strings are read by value, not truthiness."""
        assert UserRecord.from_dict({'_id': 'u1', 'logged_in': 'false'}).is_temporary
        assert UserRecord.from_dict({'_id': 'u1', 'logged_in': '0'}).is_temporary
        assert not UserRecord.from_dict({'_id': 'u1', 'logged_in': 'true'}).is_temporary
        assert not UserRecord.from_dict({'_id': 'u1', 'logged_in': 1}).is_temporary

    def test_falls_back_to_requested_id(self):
        assert UserRecord.from_dict({'username': 'a'}, user_id='u9').id == 'u9'


def test_user_ref_wire_format():
    assert UserRef('u1', 'alice').to_dict() == {'_id': 'u1', 'username': 'alice'}
