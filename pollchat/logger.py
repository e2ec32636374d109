import logging

from .config import LOG_DATEFMT, LOG_FILE, LOG_FORMAT, LOG_LEVEL

lg = logging.getLogger('pollchat')
lg.setLevel(LOG_LEVEL)
lg.propagate = False

if lg.hasHandlers():
    lg.handlers.clear()

# Терминал целиком занят интерфейсом, поэтому пишем только в файл.
file_handler = logging.FileHandler(LOG_FILE, mode='w', encoding='utf-8', delay=True)
file_handler.setLevel(LOG_LEVEL)

formatter = logging.Formatter(LOG_FORMAT, LOG_DATEFMT)
file_handler.setFormatter(formatter)

lg.addHandler(file_handler)
