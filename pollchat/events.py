"""События, которые фоновые задачи передают в задачу сессии."""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class KeyPressed:
    key: Union[str, bytes]


@dataclass(frozen=True)
class ReplyReceived:
    data: bytes


@dataclass(frozen=True)
class ConnectionClosed:
    reason: str
