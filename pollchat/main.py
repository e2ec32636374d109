import argparse
import sys
from typing import List, Optional

import trio

from . import config
from .engine import ChatEngine
from .logger import lg
from .utils import console


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pollchat",
        description="Терминальный чат-клиент.",
        epilog="Пример запуска: pollchat your_name your_password",
    )
    parser.add_argument("login", help="Имя пользователя")
    parser.add_argument("password", help="Пароль")
    parser.add_argument("--host", default=config.DEFAULT_HOST, help=f"Адрес сервера [{config.DEFAULT_HOST}]")
    parser.add_argument("--port", type=int, default=config.DEFAULT_PORT, help=f"Порт сервера [{config.DEFAULT_PORT}]")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    engine = ChatEngine(args.login, args.password, host=args.host, port=args.port)
    try:
        return trio.run(engine.run)
    except KeyboardInterrupt:
        lg.info("Клиент остановлен по Ctrl+C.")
        console.print("\n[bold yellow]Выход из клиента.[/bold yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
