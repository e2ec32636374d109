import unicodedata
from typing import List

from rich.cells import cell_len
from rich.console import Console

console = Console(highlight=False)


def take_cells(text: str, width: int) -> str:
    """Возвращает самый длинный префикс строки, который помещается в width ячеек."""
    used = 0
    for index, char in enumerate(text):
        used += cell_len(char)
        if used > width:
            return text[:index]
    return text


def split_cells(text: str, width: int) -> List[str]:
    """
    Режет строку на куски шириной не больше width ячеек терминала.
    Перевод строки начинает новый кусок.
    """
    chunks = []
    for line in text.split('\n'):
        while cell_len(line) > width:
            head = take_cells(line, width) or line[:1]
            chunks.append(head)
            line = line[len(head):]
        chunks.append(line)
    return chunks


def drop_last_grapheme(text: str) -> str:
    """Удаляет последний символ вместе с комбинируемыми знаками после него."""
    end = len(text)
    while end > 0 and unicodedata.combining(text[end - 1]):
        end -= 1
    return text[:max(0, end - 1)]
