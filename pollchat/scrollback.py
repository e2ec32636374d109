from collections import deque
from enum import Enum
from itertools import islice
from typing import Deque, Iterator, NamedTuple, Optional, Tuple

from . import config, protocol
from .utils import split_cells, take_cells


class RowSource(Enum):
    SELF = "self"
    OTHER = "other"
    ERROR = "error"
    PLAIN = "plain"


class ChatRow(NamedTuple):
    text: str
    source: RowSource


def classify_row(text: str) -> RowSource:
    """Определяет автора строки по маркеру в её начале."""
    if text[:1] == protocol.ERROR_MARKER:
        return RowSource.ERROR
    marker = text[1:2]
    if marker == protocol.OWN_MARKER:
        return RowSource.SELF
    if marker.isdigit():
        return RowSource.OTHER
    return RowSource.PLAIN


class ScrollbackBuffer:
    """
    Кольцо строк чата фиксированной ёмкости с окном прокрутки.
    При переполнении вытесняется самая старая строка, а окно
    [read_start, read_end) после каждой записи показывает самые новые строки.
    """

    def __init__(self, capacity: int = config.SCROLLBACK_CAPACITY, width: int = config.ROW_WIDTH,
                 window_height: int = config.WINDOW_HEIGHT):
        if capacity < 1 or window_height < 1:
            raise ValueError("Ёмкость буфера и высота окна должны быть положительными")
        self.capacity = capacity
        self.width = width
        self.window_height = window_height
        self._rows: Deque[ChatRow] = deque(maxlen=capacity)
        self._read_start = 0

    @property
    def write_cursor(self) -> int:
        return len(self._rows)

    @property
    def read_start(self) -> int:
        return self._read_start

    @property
    def read_end(self) -> int:
        return min(self._read_start + self.window_height, self.write_cursor)

    def __len__(self) -> int:
        return self.write_cursor

    def __getitem__(self, index: int) -> ChatRow:
        return self._rows[index]

    def __iter__(self) -> Iterator[ChatRow]:
        return iter(self._rows)

    def append(self, row: str, source: Optional[RowSource] = None):
        if source is None:
            source = classify_row(row)
        self._rows.append(ChatRow(take_cells(row, self.width), source))
        self._read_start = max(0, self.write_cursor - self.window_height)

    def add_message(self, text: str, source: Optional[RowSource] = None):
        """Добавляет сообщение, перенося его на строки шириной буфера."""
        text = protocol.strip_message_prefix(text)
        if source is None:
            source = classify_row(text)
        for chunk in split_cells(text, self.width):
            self.append(chunk, source)

    def scroll_up(self) -> bool:
        if self._read_start == 0:
            return False
        self._read_start -= 1
        return True

    def scroll_down(self) -> bool:
        if self.write_cursor <= self.window_height or self.read_end >= self.write_cursor:
            return False
        self._read_start += 1
        return True

    def clear(self):
        self._rows.clear()
        self._read_start = 0

    def visible_rows(self) -> Tuple[ChatRow, ...]:
        return tuple(islice(self._rows, self.read_start, self.read_end))
