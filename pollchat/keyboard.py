import os
import sys
from functools import partial
from typing import IO, Callable, Optional, TYPE_CHECKING, Union

import readchar
import trio

from .events import KeyPressed
from .logger import lg
from .states import KeyResult

if TYPE_CHECKING:
    from .engine import ChatEngine

ENTER_KEYS = (readchar.key.ENTER, readchar.key.CR, readchar.key.LF)
BACKSPACE_KEYS = (readchar.key.BACKSPACE, '\x08')
SCROLL_UP_KEY = '-'
SCROLL_DOWN_KEY = '+'
COLOR_KEYS = {'1': 'window', '2': 'text', '3': 'user'}

KeyReader = Callable[[], Union[str, bytes]]


def read_raw_byte(stream: IO) -> bytes:
    """Читает один байт без декодирования: вход не терминал, readchar здесь не работает."""
    return os.read(stream.fileno(), 1)


class KeyboardHandler:
    """
    Изолирует ввод с клавиатуры. Нажатия читаются по одному символу через
    readchar в отдельном потоке и передаются задаче сессии; там же они и
    обрабатываются. Если stdin не терминал, читаются сырые байты, и
    многобайтовые символы собирает строка ввода.
    """

    def __init__(self, engine: "ChatEngine", read_key: Optional[KeyReader] = None):
        self.engine = engine
        if read_key is None:
            stream = engine.stdin or sys.stdin
            read_key = readchar.readchar if stream.isatty() else partial(read_raw_byte, stream)
        self.read_key = read_key

    async def run_input_loop(self, send_channel: trio.MemorySendChannel):
        """Основной цикл получения нажатий клавиш."""
        async with send_channel:
            while True:
                try:
                    key = await trio.to_thread.run_sync(self.read_key, abandon_on_cancel=True)
                except Exception as e:
                    lg.warning(f"Не удалось прочитать нажатие клавиши: {e}", exc_info=True)
                    await trio.sleep(0.05)
                    continue
                if not key:
                    await trio.sleep(0.05)
                    continue
                try:
                    await send_channel.send(KeyPressed(key))
                except trio.BrokenResourceError:
                    lg.debug("Задача сессии завершена, чтение клавиатуры остановлено.")
                    return

    async def handle_key(self, key: Union[str, bytes]):
        engine = self.engine
        model = engine.model
        command_line = model.command_line

        if isinstance(key, bytes):
            if command_line.pending_lead or key[:1] >= b'\x80':
                result = command_line.feed_bytes(key)
                if result is not None and result is not KeyResult.IGNORED:
                    engine.layout_manager.redraw('input')
                return
            key = key.decode('ascii')

        if key == readchar.key.ESC:
            lg.info("Нажат Escape, завершение сессии.")
            engine.stop_event.set()
            return

        if key == readchar.key.TAB:
            model.scrollback.clear()
            engine.layout_manager.redraw_all()
            return

        if command_line.is_empty:
            if key == SCROLL_UP_KEY:
                if model.scrollback.scroll_up():
                    engine.layout_manager.redraw('messages')
                return
            if key == SCROLL_DOWN_KEY:
                if model.scrollback.scroll_down():
                    engine.layout_manager.redraw('messages')
                return
            if key in COLOR_KEYS:
                model.colors.cycle(COLOR_KEYS[key])
                engine.touch()
                engine.layout_manager.redraw_all()
                return

        if key in ENTER_KEYS:
            commit = command_line.commit()
            if commit:
                await engine.send_commit(commit)
            engine.layout_manager.redraw('input')
            return

        if key in BACKSPACE_KEYS:
            if command_line.backspace():
                engine.layout_manager.redraw('input')
            return

        if len(key) == 1 and key.isprintable():
            if command_line.feed(key) is not KeyResult.IGNORED:
                engine.layout_manager.redraw('input')
