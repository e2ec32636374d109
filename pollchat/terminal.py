import os
import sys
from contextlib import contextmanager
from typing import IO, Iterator, Optional

from .logger import lg

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import termios


@contextmanager
def input_mode(stream: Optional[IO] = None) -> Iterator[None]:
    """
    Выключает построчный ввод и эхо на время сессии и гарантированно
    возвращает исходные настройки терминала при любом выходе.
    """
    stream = stream or sys.stdin
    if _IS_WINDOWS or not stream.isatty():
        yield
        return

    fd = stream.fileno()
    saved_attributes = termios.tcgetattr(fd)
    attributes = termios.tcgetattr(fd)
    attributes[3] &= ~(termios.ICANON | termios.ECHO)
    termios.tcsetattr(fd, termios.TCSAFLUSH, attributes)
    lg.debug("Терминал переведён в посимвольный режим.")
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, saved_attributes)
        lg.debug("Настройки терминала восстановлены.")
