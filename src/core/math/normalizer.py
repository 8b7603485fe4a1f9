"""
Normalizer — приведение входов к каноничной decimal-строке

Модуль конвертирует любой допустимый вход в plain-decimal строку:
- int → десятичная запись через Decimal (без предела разрядов str(int))
- float → repr без экспоненты где возможно, затем разворот e-нотации
- str → разворот e-нотации (e-N / e+N / eN) и проверка формата
- Decimal → plain-формат "f"
- BigNumber → его текущее каноничное значение (без rescale)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат никогда не содержит экспоненту
2. Разворот e-нотации выполняется через decimal, без float-арифметики
3. to_string() никогда не поднимает исключение: невалидный вход → None
4. check_valid_num() поднимает InvalidNumberError для невалидного входа

Формат каноничной строки:
    ^-?(0|[1-9][0-9]*)(\\.[0-9]+)?$
"""

import re
from decimal import ROUND_DOWN, Context, Decimal
from typing import Final, Optional

from src.core.logger import get_logger
from src.core.math.errors import InvalidNumberError

logger = get_logger("normalizer")

# =============================================================================
# ПАТТЕРНЫ
# =============================================================================

# Каноничная decimal-строка (знак, целая часть без ведущих нулей, дробь)
CANONICAL_NUMBER_RE: Final = re.compile(r"-?(0|[1-9][0-9]*)(\.[0-9]+)?")

# Целое число без дробной части
INTEGER_RE: Final = re.compile(r"-?(0|[1-9][0-9]*)")

# Научная нотация: мантисса + e/E + экспонента
SCIENTIFIC_RE: Final = re.compile(
    r"(?P<mantissa>[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))[eE](?P<exponent>[+-]?[0-9]+)"
)

# Предел |экспоненты| e-нотации: больший сдвиг не разворачивается (вход невалиден)
MAX_EXPONENT: Final[int] = 100_000


# =============================================================================
# РАЗВОРОТ НАУЧНОЙ НОТАЦИИ
# =============================================================================


def _expand_scientific(text: str) -> Optional[str]:
    """
    Разворот e-нотации в plain-decimal строку.

    Отрицательная экспонента:
        decimals = len(mantissa) + |exponent|
        значение фиксируется с decimals дробными разрядами,
        затем хвостовые нули (и "висящая" точка) удаляются.

    Неотрицательная экспонента:
        значение приводится к целому (truncation к нулю).

    |exponent| > MAX_EXPONENT не разворачивается: результат занял бы
    произвольный объём памяти.

    Args:
        text: Строка, содержащая e/E

    Returns:
        Plain-decimal строка или None, если строка не является e-нотацией
        либо экспонента вне допустимого диапазона

    Examples:
        >>> _expand_scientific("12e-2")
        '0.12'
        >>> _expand_scientific("3.43e+9")
        '3430000000'
    """
    match = SCIENTIFIC_RE.fullmatch(text)
    if match is None:
        return None

    mantissa = match.group("mantissa")
    exponent_digits = match.group("exponent").lstrip("+-").lstrip("0")
    # Длинная запись экспоненты отсекается до int(): у int(str) есть предел разрядов
    if len(exponent_digits) > len(str(MAX_EXPONENT)):
        return None

    exponent = int(match.group("exponent"))
    if abs(exponent) > MAX_EXPONENT:
        return None

    # Размер контекста: целая часть + дробные разряды + сдвиг экспоненты
    prec = 2 * len(mantissa) + abs(exponent) + 2
    ctx = Context(prec=prec, rounding=ROUND_DOWN)
    number = Decimal(text)

    if exponent < 0:
        decimals = len(mantissa) + abs(exponent)
        quantum = Decimal(1).scaleb(-decimals, context=ctx)
        expanded = format(number.quantize(quantum, rounding=ROUND_DOWN, context=ctx), "f")
        if "." in expanded:
            expanded = expanded.rstrip("0").rstrip(".")
    else:
        expanded = format(number.quantize(Decimal(1), rounding=ROUND_DOWN, context=ctx), "f")

    if expanded.startswith("+"):
        expanded = expanded[1:]
    return expanded


def _float_to_string(value: float) -> str:
    """repr(float) без хвоста '.0' у целых значений (3430000000.0 → 3430000000)."""
    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


def to_string(value: object) -> Optional[str]:
    """
    Проверка и нормализация числа в каноничную decimal-строку.

    Допустимые входы: int, float, str, Decimal, BigNumber.
    bool не считается числом.

    Args:
        value: Произвольное значение

    Returns:
        Каноничная строка или None, если значение не является числом

    Examples:
        >>> to_string(1e-8)
        '0.00000001'
        >>> to_string(3.43e+9)
        '3430000000'
        >>> to_string("12e-2")
        '0.12'
        >>> to_string("abc") is None
        True
    """
    from src.core.domain.big_number import BigNumber

    if isinstance(value, BigNumber):
        return value.value()

    if isinstance(value, bool):
        return None

    # Целые числа всегда валидны и каноничны; Decimal обходит предел разрядов str(int)
    if isinstance(value, int):
        return format(Decimal(value), "f")

    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        value = format(value, "f")
    elif isinstance(value, float):
        value = _float_to_string(value)

    if not isinstance(value, str):
        return None

    if "e" in value or "E" in value:
        try:
            expanded = _expand_scientific(value)
        except (ArithmeticError, ValueError):
            # decimal.InvalidOperation / Overflow, либо недопустимая точность контекста
            expanded = None
        if expanded is None:
            return None
        value = expanded

    if CANONICAL_NUMBER_RE.fullmatch(value):
        return value

    return None


def check_valid_num(value: object) -> str:
    """
    Нормализация с исключением для невалидного входа.

    Используется конструктором и всеми арифметическими/сравнительными
    операциями для coercion операндов.

    Raises:
        InvalidNumberError: Если значение не приводится к каноничной строке
    """
    normalized = to_string(value)
    if normalized is None:
        logger.debug("Rejected numeric input %r (%s)", value, type(value).__name__)
        raise InvalidNumberError(
            f"Invalid argument; expecting a valid numeric value, got {value!r}"
        )
    return normalized
