"""
Domain models and value objects.

Содержит value type BigNumber и его сериализованное представление.
"""

from src.core.domain.big_number import BigNumber, NumberLike
from src.core.domain.big_number_record import BigNumberRecord

__all__ = [
    "BigNumber",
    "BigNumberRecord",
    "NumberLike",
]
