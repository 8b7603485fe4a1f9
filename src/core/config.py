"""
Config — параметры по умолчанию для decimal-движка

Значения читаются из окружения (префикс BCMATH_) через pydantic-settings.
Константы Final задают значения по умолчанию и границы native integer.
"""

import sys
from functools import lru_cache
from typing import Final

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Scale по умолчанию (количество дробных разрядов)
DEFAULT_SCALE: Final[int] = 18

# Диапазон native integer платформы (для BigNumber.to_integer())
MAX_NATIVE_INT: Final[int] = sys.maxsize
MIN_NATIVE_INT: Final[int] = -sys.maxsize - 1


# =============================================================================
# SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Настройки пакета, переопределяемые переменными окружения."""

    model_config = SettingsConfigDict(env_prefix="BCMATH_", extra="ignore")

    default_scale: int = Field(
        default=DEFAULT_SCALE, ge=0, description="Scale для BigNumber(..., scale=None)"
    )
    log_level: str = Field(default="WARNING", description="Уровень логгера 'bcmath'")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
