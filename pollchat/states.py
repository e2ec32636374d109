"""
Машина состояний строки ввода.

Строка начинается с символа команды: ``*`` - сообщение всем, ``@`` - личное
сообщение. Для личного сообщения после ``@`` идёт имя получателя, пробел и
текст; ``@`` с пробелом сразу после него отправляет текст последнему адресату.
Машина получает ввод по одному символу и ничего не отправляет сама: при
подтверждении она отдаёт готовую команду движку.
"""
import codecs
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from rich.cells import cell_len

from . import config
from .logger import lg
from .utils import drop_last_grapheme, split_cells


class InputState(Enum):
    IDLE = "idle"
    COMMAND_SELECT = "command_select"
    CAPTURING_NAME = "capturing_name"
    CAPTURING_MESSAGE = "capturing_message"


class Command(Enum):
    NONE = ""
    BROADCAST = "*"
    DIRECT = "@"


class KeyResult(Enum):
    ECHO = "echo"          # строка изменилась, нужно перерисовать поле ввода
    IGNORED = "ignored"    # символ отброшен (переполнение)
    REJECTED = "rejected"  # строка сброшена из-за неверного префикса


@dataclass(frozen=True)
class Commit:
    command: Command
    message: str
    target: Optional[str] = None


class CommandLine:
    def __init__(self, input_width: int = config.INPUT_REGION[2]):
        self.input_width = input_width
        self.saved_name = ""
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='ignore')
        self._reset()

    def _reset(self):
        self.state = InputState.IDLE
        self.command = Command.NONE
        self.name = ""
        self.message = ""
        self.use_saved_name = False
        self.line = ""

    @property
    def is_empty(self) -> bool:
        return not self.line

    @property
    def pending_lead(self) -> bytes:
        """Байты начатого, но ещё не завершённого многобайтового символа."""
        return self._decoder.getstate()[0]

    @property
    def cursor(self) -> Tuple[int, int]:
        """
        Смещение курсора (столбец, строка) внутри поля ввода. Строки режутся
        так же, как их рисует поле ввода: широкий символ, не влезающий в конец
        строки, целиком переносится на следующую.
        """
        rows = split_cells(self.line, self.input_width)
        column = cell_len(rows[-1])
        if column >= self.input_width:
            return 0, len(rows)
        return column, len(rows) - 1

    def feed_bytes(self, data: bytes) -> Optional[KeyResult]:
        """
        Принимает сырые байты с клавиатуры. Ведущий байт многобайтового
        символа ждёт продолжения, после чего символ обрабатывается целиком.
        """
        result = None
        for char in self._decoder.decode(data):
            result = self.feed(char)
        return result

    def feed(self, char: str) -> KeyResult:
        if self.state is InputState.IDLE:
            return self._select_command(char)
        if self.state is InputState.COMMAND_SELECT:
            return self._after_command(char)
        if self.state is InputState.CAPTURING_NAME:
            return self._capture_name(char)
        return self._capture_message(char)

    def _select_command(self, char: str) -> KeyResult:
        if char == Command.BROADCAST.value:
            self.command = Command.BROADCAST
        elif char == Command.DIRECT.value:
            self.command = Command.DIRECT
        else:
            lg.debug(f"Строка отклонена: неизвестный префикс команды '{char}'")
            self._reset()
            return KeyResult.REJECTED
        self.state = InputState.COMMAND_SELECT
        self.line += char
        return KeyResult.ECHO

    def _after_command(self, char: str) -> KeyResult:
        if self.command is Command.BROADCAST:
            if char != " ":
                lg.debug("Строка отклонена: после '*' ожидался пробел")
                self._reset()
                return KeyResult.REJECTED
            self.state = InputState.CAPTURING_MESSAGE
        elif char == " ":
            self.use_saved_name = True
            self.state = InputState.CAPTURING_MESSAGE
        else:
            self.use_saved_name = False
            self.name = char
            self.state = InputState.CAPTURING_NAME
        self.line += char
        return KeyResult.ECHO

    def _capture_name(self, char: str) -> KeyResult:
        if char == " ":
            self.state = InputState.CAPTURING_MESSAGE
        elif len(self.name) >= config.NAME_MAX_CHARS:
            return KeyResult.IGNORED
        else:
            self.name += char
        self.line += char
        return KeyResult.ECHO

    def _capture_message(self, char: str) -> KeyResult:
        candidate = self.message + char
        if (len(candidate.encode('utf-8')) > config.MESSAGE_MAX_BYTES
                or cell_len(candidate) > config.MESSAGE_MAX_COLUMNS):
            return KeyResult.IGNORED
        self.message = candidate
        self.line += char
        return KeyResult.ECHO

    def backspace(self) -> bool:
        """Стирает последний введённый символ. Возвращает False, если стирать нечего."""
        if not self.line:
            return False
        removed = 1
        if self.state is InputState.CAPTURING_MESSAGE:
            if self.message:
                shorter = drop_last_grapheme(self.message)
                removed = len(self.message) - len(shorter)
                self.message = shorter
            elif self.command is Command.DIRECT and not self.use_saved_name:
                self.state = InputState.CAPTURING_NAME
            else:
                self.use_saved_name = False
                self.state = InputState.COMMAND_SELECT
        elif self.state is InputState.CAPTURING_NAME:
            shorter = drop_last_grapheme(self.name)
            removed = len(self.name) - len(shorter)
            self.name = shorter
            if not self.name:
                self.state = InputState.COMMAND_SELECT
        else:
            self._reset()
            return True
        self.line = self.line[:-removed]
        return True

    def cancel(self):
        self._reset()

    def commit(self) -> Optional[Commit]:
        """Завершает строку и возвращает команду для отправки (или None)."""
        command, name, message = self.command, self.name, self.message
        use_saved_name = self.use_saved_name
        self._reset()

        if command is Command.NONE or not message:
            return None
        if command is Command.BROADCAST:
            return Commit(Command.BROADCAST, message)
        if use_saved_name:
            if not self.saved_name:
                lg.warning("Нет сохранённого адресата для личного сообщения")
                return None
            name = self.saved_name
        self.saved_name = name
        return Commit(Command.DIRECT, message, name)
