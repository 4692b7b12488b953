import asyncio
import json
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from pixel_hunter.app import create_app
from pixel_hunter.config import Settings
from pixel_hunter.dispatcher import ProtocolDispatcher
from pixel_hunter.session import ConnectionSession
from pixel_hunter.store import RoomStore

TEST_COUNTDOWN = 0.05


class FakeWebSocket:
    """Collects outbound JSON; raises on send once ``broken`` is set.

    Setting ``gate`` (and ``blocked``) makes every send park on ``gate``;
    ``blocked`` is set once a send is waiting there.
    """

    def __init__(self):
        self.sent: List[dict] = []
        self.broken = False
        self.gate: Optional[asyncio.Event] = None
        self.blocked: Optional[asyncio.Event] = None

    async def send_json(self, data):
        if self.gate is not None:
            if self.blocked is not None:
                self.blocked.set()
            await self.gate.wait()
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def types(self) -> List[str]:
        return [m["type"] for m in self.sent]

    def pop(self) -> List[dict]:
        messages, self.sent = self.sent, []
        return messages


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(_env_file=None, countdown_seconds=TEST_COUNTDOWN, static_dir="__no_static__")


@pytest.fixture
def store():
    return RoomStore()


@pytest.fixture
def dispatcher(store, settings):
    return ProtocolDispatcher(store, settings)


@pytest.fixture
def make_session():
    def _make() -> ConnectionSession:
        return ConnectionSession(FakeWebSocket())
    return _make


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def send(dispatcher):
    async def _send(session, **message):
        await dispatcher.handle_raw(session, json.dumps(message))
    return _send


@pytest.fixture
def paired_room(store, make_session, send):
    """Factory returning (room, session_a, session_b) with both players seated."""
    async def _paired():
        a, b = make_session(), make_session()
        await send(a, type="create_room")
        await send(b, type="join_room", roomId=a.room_id)
        room = store.get(a.room_id)
        a.websocket.pop()
        b.websocket.pop()
        return room, a, b
    return _paired
