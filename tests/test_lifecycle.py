"""Connect/disconnect bookkeeping and room collection."""
from signal_relay.lifecycle import disconnect, enter_room, leave_room
from signal_relay.registry import RoomRegistry


def _assert_consistent(registry: RoomRegistry) -> None:
    for name, room in registry.rooms.items():
        assert len(room) > 0
        members = {cid for cid in room.members}
        in_room = {sid for sid, s in registry.sessions.items() if s.room == name}
        assert members == in_room


def test_client_ids_are_unique_and_increasing(new_client):
    ids = [new_client().client_id for _ in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5
    assert ids[0] == 1


def test_ids_are_not_reused_after_disconnect(registry, new_client):
    a = new_client()
    disconnect(registry, a)
    b = new_client()
    assert b.client_id > a.client_id


def test_lobby_scenario(registry, new_client, join):
    x = new_client()
    join(x, "lobby")
    assert x.connection.drain() == [{"type": "joined", "id": x.client_id, "room": "lobby", "peers": []}]

    y = new_client()
    join(y, "lobby")
    assert y.connection.drain() == [{"type": "joined", "id": y.client_id, "room": "lobby", "peers": [x.client_id]}]
    assert x.connection.drain() == [{"type": "peer-joined", "id": y.client_id}]

    disconnect(registry, y)
    assert x.connection.drain() == [{"type": "peer-left", "id": y.client_id}]
    assert registry.rooms["lobby"].member_ids() == [x.client_id]
    _assert_consistent(registry)

    disconnect(registry, x)
    assert "lobby" not in registry
    assert registry.sessions == {}


def test_peer_left_goes_to_each_remaining_member_once(registry, new_client, join):
    a, b, c = new_client(), new_client(), new_client()
    for s in (a, b, c):
        join(s, "lobby")
    for s in (a, b, c):
        s.connection.drain()

    disconnect(registry, b)
    assert a.connection.drain() == [{"type": "peer-left", "id": b.client_id}]
    assert c.connection.drain() == [{"type": "peer-left", "id": b.client_id}]
    assert b.connection.drain() == []


def test_disconnect_without_join_is_noop(registry, new_client, join):
    a, lurker = new_client(), new_client()
    join(a, "lobby")
    a.connection.drain()

    disconnect(registry, lurker)
    assert a.connection.drain() == []
    assert list(registry.rooms) == ["lobby"]
    assert lurker.client_id not in registry.sessions


def test_disconnect_twice_is_safe(registry, new_client, join):
    a, b = new_client(), new_client()
    join(a, "lobby")
    join(b, "lobby")
    a.connection.drain()

    disconnect(registry, b)
    disconnect(registry, b)
    assert a.connection.drain() == [{"type": "peer-left", "id": b.client_id}]


def test_closed_session_is_not_writable(registry, new_client):
    a = new_client()
    disconnect(registry, a)
    assert not a.is_writable()


def test_join_and_leave_keep_registry_consistent(registry, new_client):
    sessions = [new_client() for _ in range(4)]
    enter_room(registry, sessions[0], "a")
    enter_room(registry, sessions[1], "a")
    enter_room(registry, sessions[2], "b")
    enter_room(registry, sessions[3], "b")
    _assert_consistent(registry)

    enter_room(registry, sessions[1], "b")
    _assert_consistent(registry)

    leave_room(registry, sessions[0])
    _assert_consistent(registry)
    assert "a" not in registry
    assert len(registry.rooms["b"]) == 3


def test_enter_room_reports_repeat_join(registry, new_client):
    a = new_client()
    room, is_new = enter_room(registry, a, "lobby")
    assert is_new
    again, is_new = enter_room(registry, a, "lobby")
    assert again is room
    assert not is_new
    assert len(room) == 1
