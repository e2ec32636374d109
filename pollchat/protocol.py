"""
Текстовый протокол чат-сервера.

Запросы - строки вида ``КОМАНДА|ключ=значение|...`` без завершающего перевода
строки: сервер делит поток по границам recv. Значения не экранируются, поэтому
``|`` и ``=`` внутри имени или сообщения ломают разбор на стороне сервера.
"""
from enum import Enum
from typing import List, Union

SEP = "|"
ERROR_MARKER = "-"
INCOMING_PREFIX = "MSGFROM "
OWN_MARKER = "I"


class ReplyKind(Enum):
    INFO = "info"
    ERROR = "error"


def encode_login(username: str, password: str) -> str:
    return f"LOGIN{SEP}username={username}{SEP}password={password}"


def encode_direct(username: str, message: str) -> str:
    return f"SEND{SEP}username={username}{SEP}msg={message}"


def encode_broadcast(message: str) -> str:
    return f"SNDALL{SEP}msg={message}"


def encode_ping() -> str:
    return "PING"


def encode_users_query() -> str:
    return "USERS"


def classify(reply: Union[bytes, str]) -> ReplyKind:
    """Ответ считается ошибкой тогда и только тогда, когда начинается с '-'."""
    if isinstance(reply, bytes):
        is_error = reply[:1] == ERROR_MARKER.encode()
    else:
        is_error = reply[:1] == ERROR_MARKER
    return ReplyKind.ERROR if is_error else ReplyKind.INFO


def decode_reply(data: bytes) -> str:
    text = data.decode('utf-8', errors='ignore')
    return text.strip('\x00').rstrip('\r\n')


def is_incoming_message(text: str) -> bool:
    return text.startswith(INCOMING_PREFIX)


def strip_message_prefix(text: str) -> str:
    if is_incoming_message(text):
        return text[len(INCOMING_PREFIX):]
    return text


def parse_roster(text: str) -> List[str]:
    """Первый символ ответа на USERS - маркер статуса, дальше имена по строкам."""
    return [line.strip() for line in text[1:].split('\n') if line.strip()]


def format_own_message(username: str, message: str) -> str:
    return f"[{OWN_MARKER} (to {username})]: {message}"


def has_delimiters(value: str) -> bool:
    return SEP in value or "=" in value
