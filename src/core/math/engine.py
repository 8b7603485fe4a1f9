"""
Arithmetic Engine — контракт точной decimal-арифметики

Узкий интерфейс над big-decimal примитивами:
    add / sub / mul / div / mod / pow (a, b, scale) -> str
    compare (a, b, scale) -> {-1, 0, 1}

Все операнды — каноничные decimal-строки (см. normalizer).
Все результаты — каноничные строки ровно с `scale` дробными разрядами.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат ВСЕГДА усекается к нулю (truncation), никогда не округляется
2. add/sub/mul/mod вычисляются точно до финального усечения
3. div сохраняет минимум scale + 1 верных разрядов до усечения
4. Отрицательный ноль не возвращается ("-0.00" → "0.00")
5. Глобальный decimal-контекст потока не используется и не изменяется

DecimalEngine — реализация по умолчанию на стандартном модуле decimal.
Любая замена (например, stub в тестах) обязана сохранять truncation.
"""

from decimal import MAX_EMAX, MIN_EMIN, ROUND_DOWN, Context, Decimal
from typing import Protocol

from src.core.logger import get_logger
from src.core.math.errors import DivisionByZeroError, InvalidArgumentError

logger = get_logger("engine")


# =============================================================================
# КОНТРАКТ
# =============================================================================


class ArithmeticEngine(Protocol):
    """Контракт big-decimal движка, потребляемый BigNumber."""

    def add(self, a: str, b: str, scale: int) -> str: ...

    def sub(self, a: str, b: str, scale: int) -> str: ...

    def mul(self, a: str, b: str, scale: int) -> str: ...

    def div(self, a: str, b: str, scale: int) -> str: ...

    def mod(self, a: str, b: str, scale: int) -> str: ...

    def pow(self, a: str, b: str, scale: int) -> str: ...

    def compare(self, a: str, b: str, scale: int) -> int: ...


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def _context(prec: int) -> Context:
    """Локальный контекст с усечением; Emax/Emin не ограничивают масштаб."""
    return Context(prec=max(prec, 1), rounding=ROUND_DOWN, Emax=MAX_EMAX, Emin=MIN_EMIN)


def _frac_digits(number: Decimal) -> int:
    return max(-number.as_tuple().exponent, 0)


def _int_digits(number: Decimal) -> int:
    return max(number.adjusted() + 1, 1)


def _coefficient_digits(number: Decimal) -> int:
    return len(number.as_tuple().digits)


def truncate(number: Decimal, scale: int) -> Decimal:
    """
    Усечение к нулю до `scale` дробных разрядов.

    Args:
        number: Значение
        scale: Количество дробных разрядов (>= 0)

    Returns:
        Decimal с экспонентой ровно -scale, без отрицательного нуля

    Examples:
        >>> truncate(Decimal("1.239"), 2)
        Decimal('1.23')
        >>> truncate(Decimal("-1.239"), 2)
        Decimal('-1.23')
    """
    ctx = _context(_int_digits(number) + scale + 1)
    result = number.quantize(Decimal(1).scaleb(-scale, context=ctx), rounding=ROUND_DOWN, context=ctx)
    if result.is_zero():
        result = result.copy_abs()
    return result


def to_plain(number: Decimal) -> str:
    """Plain-строка без экспоненты ("f"-формат)."""
    return format(number, "f")


# =============================================================================
# DECIMAL ENGINE
# =============================================================================


class DecimalEngine:
    """
    Реализация ArithmeticEngine на модуле decimal.

    Точность контекста подбирается на каждый вызов по размеру операндов:
    промежуточный результат точен (add/sub/mul/mod) либо содержит
    достаточно разрядов для корректного усечения (div).
    """

    def add(self, a: str, b: str, scale: int) -> str:
        x, y = Decimal(a), Decimal(b)
        ctx = _context(self._sum_prec(x, y))
        return to_plain(truncate(ctx.add(x, y), scale))

    def sub(self, a: str, b: str, scale: int) -> str:
        x, y = Decimal(a), Decimal(b)
        ctx = _context(self._sum_prec(x, y))
        return to_plain(truncate(ctx.subtract(x, y), scale))

    def mul(self, a: str, b: str, scale: int) -> str:
        x, y = Decimal(a), Decimal(b)
        ctx = _context(_coefficient_digits(x) + _coefficient_digits(y) + 1)
        return to_plain(truncate(ctx.multiply(x, y), scale))

    def div(self, a: str, b: str, scale: int) -> str:
        x, y = Decimal(a), Decimal(b)
        return to_plain(self._divide(x, y, scale))

    def mod(self, a: str, b: str, scale: int) -> str:
        """
        Остаток от деления с усечённым частным (знак делимого).

        mod(a, b) = a - b * trunc(a / b)

        Examples:
            >>> DecimalEngine().mod("10", "3", 2)
            '1.00'
            >>> DecimalEngine().mod("-7.5", "2", 1)
            '-1.5'
        """
        x, y = Decimal(a), Decimal(b)
        if y.is_zero():
            logger.debug("Modulo by zero: %s %% %s", a, b)
            raise DivisionByZeroError("Modulo by zero")

        # Частное (целая часть) + точный остаток
        quotient_digits = max(x.adjusted() - y.adjusted() + 1, 0)
        ctx = _context(self._sum_prec(x, y) + quotient_digits + _coefficient_digits(y))
        return to_plain(truncate(ctx.remainder(x, y), scale))

    def pow(self, a: str, b: str, scale: int) -> str:
        """
        Возведение в целую степень.

        Отрицательная степень: 1 / a**|n|, усечённое до scale.

        Raises:
            InvalidArgumentError: Если степень имеет дробную часть
            DivisionByZeroError: 0 в отрицательной степени
        """
        x, y = Decimal(a), Decimal(b)
        if y != y.to_integral_value():
            raise InvalidArgumentError(f"Exponent cannot have a fractional part, got {b}")

        exponent = int(y)
        if exponent == 0:
            return to_plain(truncate(Decimal(1), scale))

        ctx = _context(_coefficient_digits(x) * abs(exponent) + 1)
        power = ctx.power(x, abs(exponent))
        if exponent > 0:
            return to_plain(truncate(power, scale))

        return to_plain(self._divide(Decimal(1), power, scale))

    def compare(self, a: str, b: str, scale: int) -> int:
        """
        Сравнение при scale: знак точной разности a - b, усечённой до scale.

        Согласовано с арифметикой: compare(a, b, s) == 0
        тогда и только тогда, когда sub(a, b, s) равно нулю.

        Цена согласованности: равенство при усечённом scale не транзитивно.
        При scale 4: 0 == 0.00009 и 0.00009 == 0.00018, но 0 < 0.00018.
        Усечение каждого операнда (как bccomp) сохранило бы транзитивность,
        но тогда equals расходился бы с sub(...).is_zero().

        Examples:
            >>> DecimalEngine().compare("1.0034", "1.00339", 4)
            0
            >>> DecimalEngine().compare("1.0034", "1.00339", 5)
            1
        """
        x, y = Decimal(a), Decimal(b)
        ctx = _context(self._sum_prec(x, y))
        difference = truncate(ctx.subtract(x, y), scale)
        if difference.is_zero():
            return 0
        return -1 if difference.is_signed() else 1

    @staticmethod
    def _sum_prec(x: Decimal, y: Decimal) -> int:
        # Целые разряды большего операнда + перенос + дробные разряды
        return max(_int_digits(x), _int_digits(y)) + 1 + max(_frac_digits(x), _frac_digits(y))

    @staticmethod
    def _divide(x: Decimal, y: Decimal, scale: int) -> Decimal:
        if y.is_zero():
            logger.debug("Division by zero: %s / %s", x, y)
            raise DivisionByZeroError("Division by zero")

        quotient_digits = max(x.adjusted() - y.adjusted() + 1, 0)
        ctx = _context(quotient_digits + scale + 2)
        return truncate(ctx.divide(x, y), scale)


# Экземпляр движка по умолчанию (stateless)
DEFAULT_ENGINE: DecimalEngine = DecimalEngine()
