import io
import os

os.environ.setdefault("POLLCHAT_LOG_FILE", os.devnull)

import pytest
import trio.testing
from rich.console import Console

from pollchat.engine import ChatEngine
from pollchat.model import SessionModel


@pytest.fixture
def console():
    """Консоль rich, пишущая escape-последовательности в память."""
    return Console(file=io.StringIO(), force_terminal=True, width=120, height=30,
                   color_system="standard", highlight=False)


@pytest.fixture
def model():
    return SessionModel("bob", "pw1")


@pytest.fixture
def stream_pair():
    """(клиентский поток, серверный поток) без настоящих сокетов."""
    return trio.testing.memory_stream_pair()


@pytest.fixture
def make_engine(console, stream_pair):
    client_stream, _ = stream_pair

    async def open_stream():
        return client_stream

    def factory(read_key=None):
        return ChatEngine("bob", "pw1", console=console, open_stream=open_stream,
                          read_key=read_key, stdin=io.StringIO())

    return factory


@pytest.fixture
def connected_engine(make_engine, stream_pair):
    """Движок после входа: поток подключён, цикл событий не запущен."""
    engine = make_engine()
    engine.network_handler.stream = stream_pair[0]
    return engine
