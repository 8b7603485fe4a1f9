"""
Core math modules

Точная decimal-арифметика фиксированного scale с гарантией усечения.
"""

# Errors
from src.core.math.errors import (
    BigNumberError,
    DivisionByZeroError,
    IntegerOverflowError,
    InvalidArgumentError,
    InvalidNumberError,
    InvalidScaleError,
    NotIntegralError,
)

# Normalizer
from src.core.math.normalizer import (
    CANONICAL_NUMBER_RE,
    INTEGER_RE,
    check_valid_num,
    to_string,
)

# Arithmetic Engine
from src.core.math.engine import (
    DEFAULT_ENGINE,
    ArithmeticEngine,
    DecimalEngine,
    truncate,
)

# Formatter
from src.core.math.formatter import render

__all__ = [
    # Errors
    "BigNumberError",
    "DivisionByZeroError",
    "IntegerOverflowError",
    "InvalidArgumentError",
    "InvalidNumberError",
    "InvalidScaleError",
    "NotIntegralError",
    # Normalizer
    "CANONICAL_NUMBER_RE",
    "INTEGER_RE",
    "check_valid_num",
    "to_string",
    # Arithmetic Engine
    "DEFAULT_ENGINE",
    "ArithmeticEngine",
    "DecimalEngine",
    "truncate",
    # Formatter
    "render",
]
