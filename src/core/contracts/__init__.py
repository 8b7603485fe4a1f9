"""
Contract Validation Module

Модуль для валидации JSON контрактов сериализованных чисел.
"""

from .validators import (
    BigNumberValidator,
    ContractValidator,
    SchemaLoader,
    validate_big_number,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "BigNumberValidator",
    # Functions
    "validate_big_number",
]
