from typing import List

from rich.text import Text

from ...utils import split_cells
from .widget import Widget


class InputWidget(Widget):
    """Набираемая строка, перенесённая по ширине поля ввода."""

    def render(self) -> List[Text]:
        command_line = self.model.command_line
        if command_line.is_empty:
            return []
        chunks = split_cells(command_line.line, command_line.input_width)
        return [Text(chunk, style=self.model.colors.text) for chunk in chunks]
