"""Queue-backed websocket connection: write failures and back-pressure."""
import asyncio

from starlette.websockets import WebSocketState

from signal_relay.transport import WebSocketConnection


class FakeWebSocket:
    def __init__(self, fail_after=None):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.sent = []
        self.fail_after = fail_after

    async def send_text(self, frame):
        if self.fail_after is not None and len(self.sent) >= self.fail_after:
            raise RuntimeError("socket closed")
        self.sent.append(frame)


def test_pump_delivers_in_order_until_closed():
    async def scenario():
        connection = WebSocketConnection(FakeWebSocket())
        writer = asyncio.create_task(connection.pump())
        for frame in ("one", "two", "three"):
            connection.send_text(frame)
        while connection._outbox.qsize():
            await asyncio.sleep(0)
        connection.close()
        await writer
        return connection

    connection = asyncio.run(scenario())
    assert connection.ws.sent == ["one", "two", "three"]
    assert not connection.is_writable()


def test_write_failure_marks_connection_unwritable():
    async def scenario():
        connection = WebSocketConnection(FakeWebSocket(fail_after=1))
        connection.send_text("first")
        connection.send_text("second")
        connection.send_text("third")
        await connection.pump()
        return connection

    connection = asyncio.run(scenario())
    assert connection.ws.sent == ["first"]
    assert not connection.is_writable()

    queued = connection._outbox.qsize()
    connection.send_text("later")
    assert connection._outbox.qsize() == queued


def test_full_outbox_is_unwritable_and_drops_frames():
    async def scenario():
        connection = WebSocketConnection(FakeWebSocket(), max_pending=2)
        connection.send_text("a")
        assert connection.is_writable()
        connection.send_text("b")
        assert not connection.is_writable()
        connection.send_text("c")
        assert connection._outbox.qsize() == 2

        # Closing a full outbox stops the writer at its next frame.
        connection.close()
        await connection.pump()
        return connection

    connection = asyncio.run(scenario())
    assert connection.ws.sent == []
    assert not connection.is_writable()
