from typing import List

from rich.text import Text

from .widget import Widget


class RosterWidget(Widget):
    def render(self) -> List[Text]:
        return [Text(name, style=self.model.colors.user) for name in self.model.roster]
