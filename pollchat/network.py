from functools import partial
from typing import Awaitable, Callable, Optional, TYPE_CHECKING

import trio

from . import config, protocol
from .errors import AuthenticationFailed, ConnectionFailed, ConnectionLost
from .events import ConnectionClosed, ReplyReceived
from .logger import lg

if TYPE_CHECKING:
    from .engine import ChatEngine

StreamOpener = Callable[[], Awaitable[trio.abc.Stream]]


class NetworkHandler:
    """Управляет сетевым соединением, входом и циклом получения ответов сервера."""

    def __init__(self, engine: "ChatEngine", open_stream: Optional[StreamOpener] = None):
        self.engine = engine
        self._open_stream = open_stream or partial(trio.open_tcp_stream, engine.host, engine.port)
        self.stream: Optional[trio.abc.Stream] = None
        self._is_closing = False

    async def connect(self):
        """Устанавливает TCP-соединение с сервером."""
        lg.info(f"Подключение к {self.engine.host}:{self.engine.port}")
        try:
            with trio.move_on_after(config.CONNECT_TIMEOUT):
                self.stream = await self._open_stream()
        except OSError as e:
            lg.warning(f"Ошибка подключения к серверу: {e}", exc_info=True)
            raise ConnectionFailed(e.strerror or str(e)) from e
        if not self.stream:
            raise ConnectionFailed("таймаут подключения")
        self.engine.model.is_connected = True

    async def login(self):
        """Отправляет LOGIN и ждёт ровно один ответ. Ответ-ошибка завершает вход."""
        model = self.engine.model
        await self.send_line(protocol.encode_login(model.username, model.password))
        reply = protocol.decode_reply(await self.receive_reply())
        if protocol.classify(reply) is protocol.ReplyKind.ERROR:
            lg.warning(f"Сервер отклонил вход пользователя {model.username}: {reply}")
            raise AuthenticationFailed(reply)
        lg.info(f"Вход выполнен: {reply}")

    async def run_message_loop(self, send_channel: trio.MemorySendChannel):
        """Читает ответы сервера и передаёт их задаче сессии."""
        async with send_channel:
            try:
                while True:
                    data = await self.receive_reply()
                    await send_channel.send(ReplyReceived(data))
            except ConnectionLost as e:
                if not self._is_closing:
                    await send_channel.send(ConnectionClosed(str(e)))
            except trio.BrokenResourceError:
                lg.debug("Задача сессии завершена, чтение сокета остановлено.")

    async def send_line(self, line: str):
        if not self.stream or self._is_closing:
            raise ConnectionLost("соединение не установлено")
        lg.debug(f"Отправка: {line}")
        try:
            await self.stream.send_all(line.encode('utf-8'))
        except (trio.BrokenResourceError, trio.ClosedResourceError) as e:
            lg.error(f"Ошибка сокета при отправке: {e}")
            raise ConnectionLost("ошибка отправки") from e

    async def receive_reply(self) -> bytes:
        if not self.stream:
            raise ConnectionLost("соединение не установлено")
        try:
            data = await self.stream.receive_some(config.RECV_SIZE)
        except (trio.BrokenResourceError, trio.ClosedResourceError) as e:
            lg.error(f"Ошибка сокета при чтении ответа: {e}")
            raise ConnectionLost("ошибка чтения") from e
        if not data:
            lg.warning("Соединение закрыто сервером (получены пустые данные).")
            raise ConnectionLost("сервер закрыл соединение")
        lg.debug(f"Получено: {data!r}")
        return data

    async def close(self):
        if self.stream and not self._is_closing:
            self._is_closing = True
            self.engine.model.is_connected = False
            lg.info("Закрытие соединения с сервером.")
            await self.stream.aclose()
