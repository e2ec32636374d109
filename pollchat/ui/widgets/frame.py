from typing import List

from rich.text import Text

from ... import config
from .widget import Widget


class FrameWidget(Widget):
    """Рамка окна: внешняя граница, разделитель чата и списка пользователей, поле ввода снизу."""

    def render(self) -> List[Text]:
        width, height = config.SCREEN_WIDTH, config.SCREEN_HEIGHT
        border = config.BORDER_CHAR
        full = border * width
        rows = []
        for y in range(1, height + 1):
            if y in (1, config.DIVIDER_ROW, height):
                rows.append(full)
                continue
            cells = [" "] * width
            cells[0] = cells[-1] = border
            if y < config.DIVIDER_ROW:
                cells[config.DIVIDER_COLUMN - 1] = border
            rows.append("".join(cells))
        return [Text(row, style=self.model.colors.window) for row in rows]
