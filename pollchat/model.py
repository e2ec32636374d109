from typing import List

from . import config
from .scrollback import ScrollbackBuffer
from .states import CommandLine


class ColorScheme:
    """Три независимых цвета интерфейса: рамка, свой текст, чужой текст."""

    def __init__(self, window: str = config.DEFAULT_WINDOW_COLOR, text: str = config.DEFAULT_TEXT_COLOR,
                 user: str = config.DEFAULT_USER_COLOR):
        self.window = window
        self.text = text
        self.user = user

    @staticmethod
    def _previous(color: str) -> str:
        index = config.PALETTE.index(color)
        return config.PALETTE[index - 1]

    def cycle(self, slot: str):
        """Сдвигает цвет слота на предыдущий в палитре, с красного - на белый."""
        setattr(self, slot, self._previous(getattr(self, slot)))


class SessionModel:
    """
    Единый источник истины для сессии чата.
    Хранит всё, что нужно для отрисовки: историю, список пользователей,
    строку ввода и цвета.
    """

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self.colors = ColorScheme()
        self.scrollback = ScrollbackBuffer()
        self.command_line = CommandLine()
        self.roster: List[str] = []
        self.is_connected: bool = False
