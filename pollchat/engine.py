from collections import deque
from typing import Callable, Deque, IO, NamedTuple, Optional, Union

import trio
from rich.console import Console

from . import config, protocol, terminal
from .errors import AuthenticationFailed, ConnectionFailed, ConnectionLost
from .events import ConnectionClosed, KeyPressed, ReplyReceived
from .keyboard import KeyboardHandler
from .logger import lg
from .model import SessionModel
from .network import NetworkHandler, StreamOpener
from .scrollback import RowSource
from .states import Command, Commit
from .ui.layout import LayoutManager
from .utils import console as default_console


class AwaitRoster(NamedTuple):
    pass


class AwaitDirectAck(NamedTuple):
    username: str
    message: str


class AwaitBroadcastAck(NamedTuple):
    message: str


class AwaitPong(NamedTuple):
    pass


# Сервер отвечает на каждый запрос по порядку, поэтому очередь ожиданий
# пополняется при каждой отправке.
PendingReply = Union[AwaitRoster, AwaitDirectAck, AwaitBroadcastAck, AwaitPong]


class ChatEngine:
    """
    Ядро клиента. Владеет состоянием сессии: получает события клавиатуры и
    сети через канал, по одному за раз, и следит за простоем соединения.
    """

    def __init__(self, username: str, password: str, host: str = config.DEFAULT_HOST,
                 port: int = config.DEFAULT_PORT, console: Optional[Console] = None,
                 open_stream: Optional[StreamOpener] = None,
                 read_key: Optional[Callable[[], str]] = None,
                 stdin: Optional[IO] = None):
        self.host = host
        self.port = port
        self.stdin = stdin
        self.stop_event = trio.Event()
        self.console = console or default_console
        self.model = SessionModel(username, password)
        self.network_handler = NetworkHandler(self, open_stream)
        self.keyboard_handler = KeyboardHandler(self, read_key)
        self.layout_manager = LayoutManager(self.model, self.console)
        self.last_activity = 0.0
        self._pending: Deque[PendingReply] = deque()
        self.failure: Optional[str] = None

        lg.info(f"Движок клиента инициализирован для подключения к {host}:{port}")

    def touch(self):
        """Отмечает активность, сдвигая момент следующего PING."""
        self.last_activity = trio.current_time()

    async def _send(self, line: str):
        await self.network_handler.send_line(line)
        self.touch()

    async def request_roster(self):
        await self._send(protocol.encode_users_query())
        self._pending.append(AwaitRoster())

    async def ping(self):
        lg.debug(f"Нет активности {config.IDLE_PING_SECONDS} с, отправка PING.")
        await self._send(protocol.encode_ping())
        self._pending.append(AwaitPong())

    async def send_commit(self, commit: Commit):
        for field in (commit.target or "", commit.message):
            if protocol.has_delimiters(field):
                lg.warning(f"Поле '{field}' содержит разделители протокола и будет искажено сервером.")

        if commit.command is Command.BROADCAST:
            await self._send(protocol.encode_broadcast(commit.message))
            self._pending.append(AwaitBroadcastAck(commit.message))
            return

        await self._send(protocol.encode_direct(commit.target, commit.message))
        self._pending.append(AwaitDirectAck(commit.target, commit.message))

    async def handle_reply(self, data: bytes):
        text = protocol.decode_reply(data)
        model = self.model

        if protocol.is_incoming_message(text) or not self._pending:
            if len(text) <= 2:
                lg.debug(f"Пропущен короткий ответ: {text!r}")
                return
            model.scrollback.add_message(text)
            self.layout_manager.redraw('messages')
            await self.request_roster()
            return

        expected = self._pending.popleft()
        if isinstance(expected, AwaitRoster):
            model.roster = protocol.parse_roster(text)
            self.layout_manager.redraw('roster')
            return

        is_error = protocol.classify(text) is protocol.ReplyKind.ERROR
        if isinstance(expected, (AwaitPong, AwaitBroadcastAck)):
            if not is_error:
                return
            lg.info(f"Сервер отклонил запрос {type(expected).__name__}: {text}")
            model.scrollback.add_message(text, RowSource.ERROR)
            self.layout_manager.redraw('messages')
            return

        if is_error:
            lg.info(f"Личное сообщение для {expected.username} не доставлено: {text}")
            model.scrollback.add_message(text, RowSource.ERROR)
        else:
            model.scrollback.add_message(
                protocol.format_own_message(expected.username, expected.message), RowSource.SELF
            )
        self.layout_manager.redraw('messages')

    async def handle_event(self, event: Union[KeyPressed, ReplyReceived, ConnectionClosed]):
        if isinstance(event, KeyPressed):
            await self.keyboard_handler.handle_key(event.key)
        elif isinstance(event, ReplyReceived):
            self.touch()
            await self.handle_reply(event.data)
        elif isinstance(event, ConnectionClosed):
            raise ConnectionLost(event.reason)

    async def process_events(self, receive_channel: trio.MemoryReceiveChannel):
        """
        Обрабатывает события по одному. Если за IDLE_PING_SECONDS не было
        сетевой активности, отправляет PING.
        """
        async with receive_channel:
            try:
                while not self.stop_event.is_set():
                    deadline = self.last_activity + config.IDLE_PING_SECONDS
                    with trio.move_on_at(deadline) as idle_scope:
                        event = await receive_channel.receive()
                    if idle_scope.cancelled_caught:
                        await self.ping()
                        continue
                    await self.handle_event(event)
            except (ConnectionLost, trio.EndOfChannel) as e:
                lg.error(f"Сессия прервана: {e}")
                self.failure = str(e) or "соединение закрыто"
            finally:
                self.stop_event.set()

    async def _run_session(self):
        self.touch()
        self.layout_manager.redraw_all()
        await self.request_roster()

        send_channel, receive_channel = trio.open_memory_channel(0)
        async with trio.open_nursery() as nursery:
            async with send_channel:
                nursery.start_soon(self.network_handler.run_message_loop, send_channel.clone())
                nursery.start_soon(self.keyboard_handler.run_input_loop, send_channel.clone())
            nursery.start_soon(self.process_events, receive_channel)
            await self.stop_event.wait()
            nursery.cancel_scope.cancel()

    async def run(self) -> int:
        """Запускает сессию. Возвращает код завершения процесса."""
        try:
            await self.network_handler.connect()
            await self.network_handler.login()
        except ConnectionFailed as e:
            self.console.print(f"[bold red]Не удалось подключиться к серверу: {e}[/bold red]")
            return 1
        except AuthenticationFailed:
            self.console.print("[bold red]Неверный логин или пароль. Повторите попытку.[/bold red]")
            await self.network_handler.close()
            return 1
        except ConnectionLost as e:
            self.console.print(f"[bold red]Соединение потеряно при входе: {e}[/bold red]")
            await self.network_handler.close()
            return 1

        try:
            with terminal.input_mode(self.stdin):
                try:
                    await self._run_session()
                finally:
                    self.layout_manager.park_cursor()
        except ConnectionLost as e:
            lg.error(f"Сессия прервана: {e}")
            self.failure = str(e)
        except Exception as e:
            lg.error("Критическая ошибка в ChatEngine.run", exc_info=True)
            self.failure = f"непредвиденная ошибка: {e}"
        finally:
            await self.network_handler.close()

        if self.failure:
            self.console.print(f"\n[bold red]Сессия прервана: {self.failure}[/bold red]")
            return 1
        lg.info("Сессия завершена пользователем.")
        return 0
