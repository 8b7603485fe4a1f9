"""
BigNumber — fixed-scale decimal value type

Immutable значение: каноничная decimal-строка + scale.

- value: plain-decimal строка (без экспоненты, без ведущего '+'),
  ровно `scale` дробных разрядов после конструирования
- scale: количество дробных разрядов для операций без явного scale

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. scale >= 0 всегда; отрицательный scale → InvalidScaleError (без clamp)
2. Результаты арифметики усекаются к нулю до effective scale
3. Любая операция (включая change_scale) возвращает новый экземпляр
4. Операнды всегда проходят Normalizer перед делегированием в engine

Effective scale:
    явный int scale >= 0 переопределяет, иначе используется scale экземпляра.
    Переопределение действует только на вызов, которому передано.

Examples:
    >>> BigNumber(0, 18).add("0.12345678").mul(2).mul(4, scale=3).value()
    '0.987'
    >>> BigNumber("0.000000000000000001", 17).is_positive()
    False
"""

import functools
import math
from decimal import Decimal
from typing import Any, Optional, Union

from src.core.config import MAX_NATIVE_INT, MIN_NATIVE_INT, get_settings
from src.core.contracts.validators import validate_big_number
from src.core.domain.big_number_record import BigNumberRecord
from src.core.logger import get_logger
from src.core.math.engine import DEFAULT_ENGINE, ArithmeticEngine
from src.core.math.errors import (
    IntegerOverflowError,
    InvalidArgumentError,
    InvalidScaleError,
    NotIntegralError,
)
from src.core.math.formatter import render
from src.core.math.normalizer import INTEGER_RE, check_valid_num, to_string

logger = get_logger("big_number")

NumberLike = Union[str, int, float, Decimal, "BigNumber"]

# Типы, участвующие в операторах (==, <, +, ...). str исключён, как у Decimal
_OPERATOR_TYPES = (int, float, Decimal)


def _is_scale(scale: Any) -> bool:
    return isinstance(scale, int) and not isinstance(scale, bool) and scale >= 0


def _frac_length(digits: str) -> int:
    _, _, fractional = digits.partition(".")
    return len(fractional)


@functools.total_ordering
class BigNumber:
    """
    Decimal-число фиксированного scale.

    Арифметика делегируется в `engine` (ArithmeticEngine). Подкласс может
    переопределить атрибут класса `engine`, например stub-движком в тестах.
    """

    __slots__ = ("_value", "_scale")

    engine: ArithmeticEngine = DEFAULT_ENGINE

    to_string = staticmethod(to_string)

    def __init__(self, value: NumberLike, scale: Optional[int] = None):
        if scale is None:
            scale = get_settings().default_scale
        self._check_scale(scale)
        digits = self.engine.mul(check_valid_num(value), "1", scale)
        object.__setattr__(self, "_value", digits)
        object.__setattr__(self, "_scale", scale)

    @classmethod
    def _from_parts(cls, digits: str, scale: int) -> "BigNumber":
        # Без повторного усечения: digits уже каноничны
        instance = cls.__new__(cls)
        object.__setattr__(instance, "_value", digits)
        object.__setattr__(instance, "_scale", scale)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # =========================================================================
    # SCALE
    # =========================================================================

    @staticmethod
    def _check_scale(scale: Any) -> None:
        if not _is_scale(scale):
            logger.debug("Rejected scale %r", scale)
            raise InvalidScaleError(f"Scale value must be a non-negative integer, got {scale!r}")

    def _use_scale(self, scale: Optional[int] = None) -> int:
        return scale if _is_scale(scale) else self._scale

    @property
    def scale(self) -> int:
        return self._scale

    def change_scale(self, scale: int) -> "BigNumber":
        """
        Новый экземпляр с тем же значением и другим scale по умолчанию.

        Хранимые разряды НЕ усекаются: scale влияет только на последующие
        операции без явного scale.

        Raises:
            InvalidScaleError: Если scale < 0
        """
        self._check_scale(scale)
        return self._from_parts(self._value, scale)

    # =========================================================================
    # ВЫВОД
    # =========================================================================

    def value(self, frac_digits: Optional[int] = None, trim_to_size: bool = True) -> str:
        """
        Значение как строка.

        - frac_digits > 0: значение приводится к N дробным разрядам,
          недостающие дополняются нулями
            - "0.000000000000000000" (scale 18) → "0.0000" при frac_digits=4
            - "0.102300456000000000" → "0.1023004" при trim_to_size=True,
              иначе "0.102300456"

        Args:
            frac_digits: Количество дробных разрядов (None → как хранится)
            trim_to_size: Усекать ли значащие разряды
        """
        return render(self._value, frac_digits, trim_to_size, self.engine)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r}, scale={self._scale})"

    # =========================================================================
    # СЕРИАЛИЗАЦИЯ
    # =========================================================================

    def to_record(self) -> BigNumberRecord:
        return BigNumberRecord(value=self._value, scale=self._scale)

    @classmethod
    def from_record(cls, record: BigNumberRecord) -> "BigNumber":
        """Восстановление: value повторно валидируется, scale применяется как в конструкторе."""
        return cls(record.value, record.scale)

    def to_dict(self) -> dict[str, Any]:
        return self.to_record().model_dump()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BigNumber":
        """
        Восстановление из dict с проверкой JSON-контракта big_number.

        Raises:
            jsonschema.ValidationError: Если data не соответствует контракту
            InvalidNumberError: Если value не проходит Normalizer
        """
        validate_big_number(data)
        return cls(data["value"], data["scale"])

    def __reduce__(self):
        return (type(self), (self._value, self._scale))

    # =========================================================================
    # ПРОВЕРКИ СОСТОЯНИЯ
    # =========================================================================

    def is_integer(self) -> bool:
        """
        Нет дробной части в хранимой строке.

        При scale > 0 конструктор дописывает дробные нули, поэтому
        BigNumber(1) (scale 18) не является integer, а BigNumber(1, 0) — является.
        """
        return INTEGER_RE.fullmatch(self._value) is not None

    def is_zero(self) -> bool:
        return self.engine.compare(self._value, "0", self._scale) == 0

    def is_positive(self) -> bool:
        return self.engine.compare(self._value, "0", self._scale) == 1

    def is_negative(self) -> bool:
        return self.engine.compare(self._value, "0", self._scale) == -1

    def to_integer(self) -> int:
        """
        Значение как native int.

        Raises:
            NotIntegralError: Если значение не integer (см. is_integer)
            IntegerOverflowError: Если значение вне [MIN_NATIVE_INT, MAX_NATIVE_INT]
        """
        if not self.is_integer():
            raise NotIntegralError(f"BigNumber value {self._value} is not an integer")

        if self.engine.compare(self._value, str(MAX_NATIVE_INT), 0) == 1:
            raise IntegerOverflowError(f"BigNumber value {self._value} exceeds {MAX_NATIVE_INT}")
        if self.engine.compare(self._value, str(MIN_NATIVE_INT), 0) == -1:
            raise IntegerOverflowError(f"BigNumber value {self._value} is below {MIN_NATIVE_INT}")

        return int(self._value)

    def __int__(self) -> int:
        return self.to_integer()

    def __bool__(self) -> bool:
        return not self.is_zero()

    # =========================================================================
    # СРАВНЕНИЕ
    # =========================================================================

    def cmp(self, comp: NumberLike, scale: Optional[int] = None) -> int:
        """
        Сравнение с другим числом при effective scale.

        Returns:
            -1 / 0 / 1
        """
        return self.engine.compare(self._value, check_valid_num(comp), self._use_scale(scale))

    def equals(self, comp: NumberLike, scale: Optional[int] = None) -> bool:
        return self.cmp(comp, scale) == 0

    def greater_than(self, comp: NumberLike, scale: Optional[int] = None) -> bool:
        return self.cmp(comp, scale) > 0

    def greater_than_or_equals(self, comp: NumberLike, scale: Optional[int] = None) -> bool:
        return self.cmp(comp, scale) >= 0

    def less_than(self, comp: NumberLike, scale: Optional[int] = None) -> bool:
        return self.cmp(comp, scale) < 0

    def less_than_or_equals(self, comp: NumberLike, scale: Optional[int] = None) -> bool:
        return self.cmp(comp, scale) <= 0

    def in_range(self, minimum: NumberLike, maximum: NumberLike, scale: Optional[int] = None) -> bool:
        """Значение в [minimum, maximum] (границы включительно)."""
        scale = self._use_scale(scale)
        if self.engine.compare(self._value, check_valid_num(minimum), scale) == -1:
            return False
        return self.engine.compare(self._value, check_valid_num(maximum), scale) != 1

    def _exact_cmp(self, other: Any) -> Optional[int]:
        # Сравнение без потери разрядов: scale = длина большей дроби.
        # float берётся по точному двоичному значению, как в Decimal:
        # так == согласовано с __hash__, и BigNumber("0.1", 1) != 0.1
        if isinstance(other, BigNumber):
            digits = other._value
        elif isinstance(other, float):
            if not math.isfinite(other):
                return None
            digits = to_string(Decimal(other))
        elif isinstance(other, _OPERATOR_TYPES) and not isinstance(other, bool):
            digits = to_string(other)
            if digits is None:
                return None
        else:
            return None
        scale = max(_frac_length(self._value), _frac_length(digits))
        return self.engine.compare(self._value, digits, scale)

    def __eq__(self, other: Any) -> bool:
        result = self._exact_cmp(other)
        if result is None:
            return NotImplemented
        return result == 0

    def __lt__(self, other: Any) -> bool:
        result = self._exact_cmp(other)
        if result is None:
            return NotImplemented
        return result < 0

    def __hash__(self) -> int:
        return hash(Decimal(self._value))

    # =========================================================================
    # АРИФМЕТИКА
    # =========================================================================

    def add(self, num: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        scale = self._use_scale(scale)
        return type(self)(self.engine.add(self._value, check_valid_num(num), scale), scale)

    def sub(self, num: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        scale = self._use_scale(scale)
        return type(self)(self.engine.sub(self._value, check_valid_num(num), scale), scale)

    def mul(self, num: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        scale = self._use_scale(scale)
        return type(self)(self.engine.mul(self._value, check_valid_num(num), scale), scale)

    def div(self, num: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        """
        Деление с усечением до effective scale.

        Raises:
            DivisionByZeroError: Если делитель равен нулю
        """
        scale = self._use_scale(scale)
        return type(self)(self.engine.div(self._value, check_valid_num(num), scale), scale)

    def mod(self, divisor: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        """Остаток от деления (знак делимого)."""
        scale = self._use_scale(scale)
        return type(self)(self.engine.mod(self._value, check_valid_num(divisor), scale), scale)

    def remainder(self, divisor: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        return self.mod(divisor, scale)

    def pow(self, num: NumberLike, scale: Optional[int] = None) -> "BigNumber":
        """
        Возведение в целую степень.

        Raises:
            InvalidArgumentError: Если степень имеет дробную часть
        """
        scale = self._use_scale(scale)
        return type(self)(self.engine.pow(self._value, check_valid_num(num), scale), scale)

    def mul_by_exp(self, base: int, exponent: int, scale: Optional[int] = None) -> "BigNumber":
        """
        Умножение на base ** exponent (например, конверсия единиц 10**8).

        Степень вычисляется точно как целое (pow при scale 0), без float-дрейфа.

        Raises:
            InvalidArgumentError: Если base < 1 или exponent < 1
        """
        scale = self._use_scale(scale)
        factor = self._exp_factor(base, exponent)
        return type(self)(self.engine.mul(self._value, factor, scale), scale)

    def div_by_exp(self, base: int, exponent: int, scale: Optional[int] = None) -> "BigNumber":
        """
        Деление на base ** exponent.

        Raises:
            InvalidArgumentError: Если base < 1 или exponent < 1
        """
        scale = self._use_scale(scale)
        factor = self._exp_factor(base, exponent)
        return type(self)(self.engine.div(self._value, factor, scale), scale)

    def _exp_factor(self, base: int, exponent: int) -> str:
        if isinstance(base, bool) or not isinstance(base, int) or base < 1:
            raise InvalidArgumentError('Value for param "base" must be a positive integer')
        if isinstance(exponent, bool) or not isinstance(exponent, int) or exponent < 1:
            raise InvalidArgumentError('Value for param "exponent" must be a positive integer')
        return self.engine.pow(str(base), str(exponent), 0)

    def copy(self) -> "BigNumber":
        return self._from_parts(self._value, self._scale)

    # =========================================================================
    # ОПЕРАТОРЫ
    # =========================================================================
    # Операторы используют scale экземпляра BigNumber; str-операнды не принимаются

    def _operand(self, other: Any) -> Optional[NumberLike]:
        if isinstance(other, BigNumber):
            return other
        if isinstance(other, _OPERATOR_TYPES) and not isinstance(other, bool):
            return other
        return None

    def __add__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.add(operand)

    __radd__ = __add__

    def __sub__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.sub(operand)

    def __rsub__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return type(self)(operand, self._scale).sub(self)

    def __mul__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.mul(operand)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.div(operand)

    def __rtruediv__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return type(self)(operand, self._scale).div(self)

    def __mod__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.mod(operand)

    def __pow__(self, other: Any) -> "BigNumber":
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.pow(operand)

    def __neg__(self) -> "BigNumber":
        return self.mul(-1)

    def __abs__(self) -> "BigNumber":
        if self.is_negative():
            return self.mul(-1)
        return self.copy()
