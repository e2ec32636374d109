from typing import List

from rich.text import Text

from ... import config
from ...scrollback import RowSource
from .widget import Widget


class ChatWidget(Widget):
    """
    Область сообщений. Показывает видимое окно истории; цвет строки зависит
    от её автора, ошибки всегда красные.
    """

    def _style_for(self, source: RowSource) -> str:
        if source is RowSource.ERROR:
            return config.ERROR_COLOR
        if source is RowSource.OTHER:
            return self.model.colors.user
        return self.model.colors.text

    def render(self) -> List[Text]:
        return [Text(row.text, style=self._style_for(row.source))
                for row in self.model.scrollback.visible_rows()]
