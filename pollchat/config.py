import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_HOST = os.getenv("POLLCHAT_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("POLLCHAT_PORT", "81"))
CONNECT_TIMEOUT = 10

LOG_FILE = os.getenv("POLLCHAT_LOG_FILE", "client.log")
LOG_LEVEL = os.getenv("POLLCHAT_LOG_LEVEL", "DEBUG")
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] [%(funcName)s] %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

RECV_SIZE = 256
IDLE_PING_SECONDS = 20

SCROLLBACK_CAPACITY = 50
ROW_WIDTH = 85
WINDOW_HEIGHT = 24

NAME_MAX_CHARS = 20
MESSAGE_MAX_BYTES = 256
MESSAGE_MAX_COLUMNS = 232

# Экран: координаты с единицы, как у терминала.
SCREEN_WIDTH = 120
SCREEN_HEIGHT = 30
DIVIDER_COLUMN = 89
DIVIDER_ROW = 26
MESSAGES_REGION = (3, 2, ROW_WIDTH, WINDOW_HEIGHT)
ROSTER_REGION = (91, 2, 28, WINDOW_HEIGHT)
INPUT_REGION = (3, 27, 116, 3)
PARK_POSITION = (1, SCREEN_HEIGHT)

BORDER_CHAR = "#"

PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan", "white"]
DEFAULT_WINDOW_COLOR = "magenta"
DEFAULT_TEXT_COLOR = "cyan"
DEFAULT_USER_COLOR = "yellow"
ERROR_COLOR = "red"
