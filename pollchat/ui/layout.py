from typing import List, NamedTuple, Optional

from rich.console import Console
from rich.control import Control
from rich.text import Text

from .. import config
from ..model import SessionModel
from ..utils import console as default_console
from .widgets.chat import ChatWidget
from .widgets.frame import FrameWidget
from .widgets.input import InputWidget
from .widgets.roster import RosterWidget


class Region(NamedTuple):
    x: int
    y: int
    width: int
    height: int


REGIONS = {
    'messages': Region(*config.MESSAGES_REGION),
    'roster': Region(*config.ROSTER_REGION),
    'input': Region(*config.INPUT_REGION),
}


class LayoutManager:
    """
    Рисует окно чата на фиксированной сетке экрана.
    Каждая область перерисовывается отдельно; всё окно целиком - только
    при первом выводе, смене цветов и очистке чата.
    """

    def __init__(self, model: "SessionModel", console: Optional[Console] = None):
        self.model = model
        self.console = console or default_console
        self.widgets = {
            'frame': FrameWidget(model),
            'messages': ChatWidget(model),
            'roster': RosterWidget(model),
            'input': InputWidget(model),
        }

    def _move_to(self, x: int, y: int):
        self.console.control(Control.move_to(x - 1, y - 1))

    def _paint(self, region: Region, lines: List[Text]):
        for offset in range(region.height):
            line = lines[offset].copy() if offset < len(lines) else Text()
            line.truncate(region.width, pad=True)
            self._move_to(region.x, region.y + offset)
            self.console.print(line, end="", soft_wrap=True)

    def redraw(self, *names: str):
        with self.console:
            for name in names:
                self._paint(REGIONS[name], self.widgets[name].render())
            self.place_cursor()

    def redraw_all(self):
        with self.console:
            screen = Region(1, 1, config.SCREEN_WIDTH, config.SCREEN_HEIGHT)
            self._paint(screen, self.widgets['frame'].render())
            for name in REGIONS:
                self._paint(REGIONS[name], self.widgets[name].render())
            self.place_cursor()

    def place_cursor(self):
        region = REGIONS['input']
        column, row = self.model.command_line.cursor
        self._move_to(region.x + column, region.y + min(row, region.height - 1))

    def park_cursor(self):
        self._move_to(*config.PARK_POSITION)
