"""
Logger — единая точка получения логгеров пакета

Библиотека не конфигурирует logging при импорте: handler вешается только
явным вызовом configure_logging() из приложения.
"""

import logging
from typing import Final, Optional

LOGGER_NAME: Final[str] = "bcmath"
LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Подключение StreamHandler к логгеру пакета.

    Args:
        level: Имя уровня (например, "DEBUG"). None → Settings.log_level,
            неизвестное имя → WARNING

    Returns:
        Сконфигурированный корневой логгер пакета
    """
    if level is None:
        from src.core.config import get_settings

        level = get_settings().log_level

    # getLevelName возвращает int только для зарегистрированных уровней
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger(LOGGER_NAME)
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolved)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
