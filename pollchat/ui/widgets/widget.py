from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

from rich.text import Text

if TYPE_CHECKING:
    from ...model import SessionModel


class Widget(ABC):
    def __init__(self, model: "SessionModel"):
        self.model = model

    @abstractmethod
    def render(self) -> List[Text]:
        """Возвращает строки области, по одной на строку экрана."""
        pass
