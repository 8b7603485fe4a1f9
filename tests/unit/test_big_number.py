"""
Тесты для BigNumber — fixed-scale decimal value type

Проверяемые инварианты:
1. Конструктор приводит значение ровно к scale дробным разрядам
2. Усечение, а не округление (scale 17 vs 18)
3. Effective scale: явный scale действует только на свой вызов
4. to_integer: NotIntegralError / IntegerOverflowError
5. Immutability: каждая операция возвращает новый экземпляр
6. Сравнение — total order, согласованный с арифметикой
7. Подмена engine (stub) через атрибут класса
"""

import itertools
from decimal import Decimal

import pytest

from src.core.domain import BigNumber
from src.core.math.engine import DecimalEngine
from src.core.math.errors import (
    DivisionByZeroError,
    IntegerOverflowError,
    InvalidArgumentError,
    InvalidNumberError,
    InvalidScaleError,
    NotIntegralError,
)

# PHP_INT_MAX / sys.maxsize на 64-bit платформе
INT64_MAX = 9223372036854775807


# =============================================================================
# КОНСТРУИРОВАНИЕ
# =============================================================================


class TestConstruction:
    """Тесты конструктора"""

    def test_as_string(self) -> None:
        """str() возвращает хранимые разряды"""
        number = BigNumber(1.23456789, 4)
        assert str(number) == "1.2345"
        assert len(str(number)) == 6

    def test_default_scale_is_18(self) -> None:
        number = BigNumber(0)
        assert number.scale == 18
        assert number.value() == "0.000000000000000000"

    @pytest.mark.parametrize("scale", [0, 1, 4, 18, 30])
    def test_exact_fraction_length(self, scale: int) -> None:
        """Ровно scale дробных разрядов (без точки при scale 0)"""
        for raw in (0, 7, -3.25, "123.456789", "1e-3", 10**20):
            digits = BigNumber(raw, scale).value()
            if scale == 0:
                assert "." not in digits
            else:
                assert len(digits.split(".")[1]) == scale

    def test_negative_scale_rejected(self) -> None:
        with pytest.raises(InvalidScaleError, match="non-negative"):
            BigNumber(1, -1)

    def test_non_int_scale_rejected(self) -> None:
        with pytest.raises(InvalidScaleError):
            BigNumber(1, 2.5)  # type: ignore[arg-type]

    def test_invalid_value_rejected(self) -> None:
        with pytest.raises(InvalidNumberError):
            BigNumber("abc")

        with pytest.raises(InvalidNumberError):
            BigNumber(None)  # type: ignore[arg-type]

    def test_from_other_big_number(self) -> None:
        source = BigNumber("1.23456", 5)
        assert BigNumber(source, 2).value() == "1.23"

    def test_repr(self) -> None:
        assert repr(BigNumber("1.23", 4)) == "BigNumber('1.2300', scale=4)"


# =============================================================================
# СОСТОЯНИЯ
# =============================================================================


class TestStates:
    """Тесты is_positive / is_negative / is_zero"""

    def test_truncation_not_rounding(self) -> None:
        """Последний разряд отбрасывается при меньшем scale"""
        assert BigNumber("0.000000000000000001", 18).is_positive() is True
        assert BigNumber("0.000000000000000001", 17).is_positive() is False

    def test_zero_forms(self) -> None:
        assert BigNumber("0.000000000000000000", 18).is_zero()
        # 19-й дробный разряд не влияет при scale 18
        assert BigNumber("0.0000000000000000001", 18).is_zero()
        assert BigNumber("0", 18).is_zero()
        assert BigNumber(0, 0).is_zero()

    def test_negative(self) -> None:
        assert BigNumber("-1", 0).is_negative()
        assert BigNumber(-0.000001, 6).is_negative()
        assert not BigNumber(-0.000001, 5).is_negative()

    def test_negative_dust_becomes_unsigned_zero(self) -> None:
        assert BigNumber("-0.001", 2).value() == "0.00"


# =============================================================================
# ЦЕЛЫЕ ЗНАЧЕНИЯ
# =============================================================================


class TestIntegers:
    """Тесты is_integer / to_integer"""

    def test_is_integer(self) -> None:
        assert not BigNumber("0.000").is_integer()
        assert not BigNumber(0.001).is_integer()
        assert not BigNumber("1.20304").is_integer()

    def test_scale_appends_fraction(self) -> None:
        """При scale > 0 визуально целые значения получают дробь"""
        assert not BigNumber(1).is_integer()
        assert BigNumber(1, 0).is_integer()
        assert not BigNumber("1").is_integer()
        assert BigNumber("1", 0).is_integer()
        assert BigNumber(0xFFFF, scale=0).is_integer()
        assert BigNumber(1, 4).value() == "1.0000"
        assert BigNumber(0xFFFF, 2).value() == "65535.00"

    def test_to_integer(self) -> None:
        assert BigNumber(0xFF - 5, scale=0).to_integer() == 250
        assert int(BigNumber(0xFF - 5, scale=0)) == 250
        assert BigNumber(INT64_MAX, scale=0).to_integer() == INT64_MAX
        assert BigNumber(-42, scale=0).to_integer() == -42

    def test_decimal_value_as_int(self) -> None:
        with pytest.raises(NotIntegralError, match="not an integer"):
            BigNumber(1.23456).to_integer()

    def test_zero_fraction_is_still_not_integral(self) -> None:
        with pytest.raises(NotIntegralError):
            BigNumber(5, 2).to_integer()

    def test_overflow_as_int(self) -> None:
        number = BigNumber(INT64_MAX, 0).add(1)
        assert number.value() == "9223372036854775808"
        with pytest.raises(IntegerOverflowError, match="exceeds"):
            number.to_integer()

    def test_underflow_as_int(self) -> None:
        number = BigNumber(-INT64_MAX - 1, 0).sub(1)
        with pytest.raises(OverflowError):
            number.to_integer()


# =============================================================================
# SCALE
# =============================================================================


class TestScaling:
    """Тесты effective scale и change_scale"""

    def test_scaling_chain(self) -> None:
        """Явный scale действует только на свой вызов"""
        number = BigNumber(0, 18)
        assert number.value() == "0.000000000000000000"
        number = number.add("0.12345678")
        assert number.value() == "0.123456780000000000"
        number = number.mul(2)
        assert number.value() == "0.246913560000000000"
        number = number.mul(4, scale=3)
        assert number.value() == "0.987"
        assert number.add("0.000012345", scale=5).value() == "0.98701"

    def test_negative_explicit_scale_falls_back(self) -> None:
        assert BigNumber("1.239", 2).add(0, scale=-1).value() == "1.23"

    def test_change_scale_keeps_digits(self) -> None:
        original = BigNumber("1.2345", 4)
        rescaled = original.change_scale(2)

        assert rescaled is not original
        assert rescaled.value() == "1.2345"
        assert rescaled.scale == 2
        assert original.scale == 4
        # Следующая операция без scale использует новый scale
        assert rescaled.add(0).value() == "1.23"

    def test_change_scale_negative_rejected(self) -> None:
        with pytest.raises(InvalidScaleError):
            BigNumber(1).change_scale(-1)


# =============================================================================
# СРАВНЕНИЕ
# =============================================================================


class TestCompares:
    """Тесты cmp / equals / greater_than / less_than / in_range"""

    def test_compares(self) -> None:
        number = BigNumber("1.0034")
        assert number.equals("1.0034")
        assert number.greater_than_or_equals("1.0034")
        assert number.less_than_or_equals("1.0034")

        assert not number.greater_than("1.0034000000001")
        assert number.greater_than("1.00339")

        assert number.less_than("1.00340000001")
        assert number.less_than("1.0035")

    def test_compare_with_explicit_scale(self) -> None:
        number = BigNumber("1.0034")
        assert number.equals("1.00339", scale=4)
        assert number.cmp("1.00339", 5) == 1

    def test_in_range(self) -> None:
        number = BigNumber("5.5", 2)
        assert number.in_range(5, 6)
        assert number.in_range("5.5", "5.5")
        assert not number.in_range(6, 7)
        assert not number.in_range(4, "5.49")
        assert BigNumber("5.509", 3).in_range("5.50", "5.50", scale=2)

    def test_invalid_operand_rejected(self) -> None:
        with pytest.raises(InvalidNumberError):
            BigNumber(1).cmp("abc")

        with pytest.raises(InvalidNumberError):
            BigNumber(1).in_range(None, 2)  # type: ignore[arg-type]

    @pytest.mark.parametrize("scale", [0, 2, 18])
    def test_total_order_consistent_with_sub(self, scale: int) -> None:
        """Ровно одно из <, ==, > и sub(...).is_zero() == equals(...)"""
        samples = ["0", "1", "-1", "1.005", "1.0049", "-0.001", "123456789.123456789"]
        for a, b in itertools.product(samples, repeat=2):
            left = BigNumber(a, 18)
            outcomes = [left.less_than(b, scale), left.equals(b, scale), left.greater_than(b, scale)]
            assert outcomes.count(True) == 1
            assert left.sub(b, scale).is_zero() == left.equals(b, scale)


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


class TestArithmeticOps:
    """Тесты add / sub / mul / div / mod / pow / *_by_exp"""

    def test_arithmetic_ops(self) -> None:
        first = BigNumber(INT64_MAX, scale=4)
        second = first.add("3.001234")
        assert second.value() == "9223372036854775810.0012"
        third = second.mul(3.5)
        assert third.value() == "32281802128991715335.0042"
        fourth = third.sub("32281802128991715335", scale=6)
        assert fourth.value() == "0.004200"

    def test_div_by_exp(self) -> None:
        assert BigNumber(5.34).div_by_exp(10, 8).value() == "0.000000053400000000"
        number = BigNumber(25351, scale=0).div_by_exp(10, 8, scale=12)
        assert number.value() == "0.000253510000"
        assert number.value(8) == "0.00025351"

    def test_mul_by_exp(self) -> None:
        number = BigNumber("3.00304567", scale=8).mul_by_exp(10, 8, scale=0)
        assert number.to_integer() == 300304567
        assert number.div(2.22, scale=4).value() == "135272327.4774"

    @pytest.mark.parametrize(
        ("base", "exponent", "message"),
        [(0, 2, "base"), (-10, 2, "base"), (10, 0, "exponent"), (10, -1, "exponent"), (10, 1.5, "exponent")],
    )
    def test_exp_arguments_validated(self, base: int, exponent: int, message: str) -> None:
        with pytest.raises(InvalidArgumentError, match=message):
            BigNumber(1).mul_by_exp(base, exponent)

        with pytest.raises(InvalidArgumentError, match=message):
            BigNumber(1).div_by_exp(base, exponent)

    def test_div(self) -> None:
        assert BigNumber(1, 5).div(3).value() == "0.33333"
        assert BigNumber(-2, 3).div(3).value() == "-0.666"

    def test_div_by_zero(self) -> None:
        with pytest.raises(DivisionByZeroError):
            BigNumber(1).div(0)

    def test_mod_and_remainder(self) -> None:
        assert BigNumber(10, 2).mod(3).value() == "1.00"
        assert BigNumber(10, 2).remainder(3).value() == "1.00"
        assert BigNumber("-7.5", 1).mod(2).value() == "-1.5"

    def test_pow(self) -> None:
        assert BigNumber("1.5", 2).pow(2).value() == "2.25"
        assert BigNumber("1.5", 1).pow(2).value() == "2.2"
        assert BigNumber(2, 0).pow(10).value() == "1024"

    def test_invalid_operand_rejected(self) -> None:
        with pytest.raises(InvalidNumberError):
            BigNumber(1).add("abc")

    def test_results_are_new_instances(self) -> None:
        number = BigNumber("1.5", 2)
        result = number.add(0)
        assert result is not number
        assert number.value() == "1.50"


# =============================================================================
# IMMUTABILITY И COPY
# =============================================================================


class TestImmutability:
    """Тесты immutability"""

    def test_setattr_rejected(self) -> None:
        number = BigNumber(1)
        with pytest.raises(AttributeError, match="immutable"):
            number._value = "2"  # type: ignore[misc]

        with pytest.raises(AttributeError):
            del number._scale

    def test_copy(self) -> None:
        number = BigNumber("1.2345", 4).change_scale(2)
        duplicate = number.copy()
        assert duplicate is not number
        assert duplicate.value() == "1.2345"
        assert duplicate.scale == 2


# =============================================================================
# ОПЕРАТОРЫ
# =============================================================================


class TestOperators:
    """Тесты Python-операторов (точное сравнение, scale экземпляра)"""

    def test_equality_is_exact(self) -> None:
        assert BigNumber("1.50", 2) == BigNumber("1.5", 1)
        assert BigNumber(1, 2) == 1
        assert BigNumber("0.5", 1) == 0.5
        assert BigNumber("1.0034", 18) != BigNumber("1.0034000000001", 18)

    def test_float_equality_uses_exact_binary_value(self) -> None:
        """0.1 как float не равен десятичному 0.1, как у Decimal"""
        assert BigNumber("0.1", 1) != 0.1
        assert BigNumber("0.1", 1) < 0.1
        assert BigNumber("0.1000000000000000055511151231257827021181583404541015625", 60) == 0.1
        assert (BigNumber(0, 0) == -0.0) is True
        assert (BigNumber(1, 0) == float("nan")) is False

    def test_equality_with_strings_is_false(self) -> None:
        assert (BigNumber(1, 2) == "1") is False

    def test_hash_consistent_with_equality(self) -> None:
        assert hash(BigNumber("1.50", 2)) == hash(BigNumber("1.5", 1))
        assert len({BigNumber(1, 0), BigNumber(1, 4), BigNumber(2, 0)}) == 2

    @pytest.mark.parametrize(
        "number, other",
        [
            (BigNumber("0.5", 1), 0.5),
            (BigNumber("-2.25", 4), -2.25),
            (BigNumber(3, 2), 3.0),
            (BigNumber(3, 2), 3),
            (BigNumber("1.50", 2), Decimal("1.5")),
            (BigNumber("0.1000000000000000055511151231257827021181583404541015625", 60), 0.1),
        ],
    )
    def test_equal_values_hash_equally(self, number: BigNumber, other: object) -> None:
        """a == b влечёт hash(a) == hash(b), в том числе для float"""
        assert number == other
        assert hash(number) == hash(other)
        assert {other: "x"}.get(number) == "x"

    def test_ordering(self) -> None:
        values = [BigNumber("2.5", 1), BigNumber(-1, 0), BigNumber("0.001", 3)]
        assert [str(v) for v in sorted(values)] == ["-1", "0.001", "2.5"]
        assert BigNumber(1, 2) < 2
        assert 2 > BigNumber(1, 2)
        assert BigNumber(1, 2) <= 1
        assert BigNumber(1, 2) >= BigNumber("0.99", 2)

    def test_arithmetic_operators(self) -> None:
        assert (BigNumber("1.5", 2) + 1).value() == "2.50"
        assert (1 + BigNumber("1.5", 2)).value() == "2.50"
        assert (BigNumber(10, 0) - 3).value() == "7"
        assert (10 - BigNumber(3, 0)).value() == "7"
        assert (BigNumber("1.5", 1) * 3).value() == "4.5"
        assert (BigNumber(1, 2) / 3).value() == "0.33"
        assert (1 / BigNumber(4, 2)).value() == "0.25"
        assert (BigNumber(10, 0) % 3).value() == "1"
        assert (BigNumber(2, 0) ** 3).value() == "8"

    def test_operators_reject_strings(self) -> None:
        with pytest.raises(TypeError):
            BigNumber(1) + "1"  # type: ignore[operator]

    def test_sign_operators(self) -> None:
        assert (-BigNumber("1.50", 2)).value() == "-1.50"
        assert abs(BigNumber("-1.50", 2)).value() == "1.50"
        assert abs(BigNumber("1.50", 2)).value() == "1.50"

    def test_bool(self) -> None:
        assert not BigNumber(0, 2)
        assert BigNumber("0.01", 2)
        assert not BigNumber("0.001", 2)


# =============================================================================
# ПОДМЕНА ENGINE
# =============================================================================


class RecordingEngine(DecimalEngine):
    """Engine, записывающий все вызовы примитивов."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str, int]] = []

    def add(self, a: str, b: str, scale: int) -> str:
        self.calls.append(("add", a, b, scale))
        return super().add(a, b, scale)

    def mul(self, a: str, b: str, scale: int) -> str:
        self.calls.append(("mul", a, b, scale))
        return super().mul(a, b, scale)


class TestEngineInjection:
    """BigNumber делегирует в engine, заданный атрибутом класса"""

    def test_subclass_engine_used(self) -> None:
        engine = RecordingEngine()
        stub_number = type("StubNumber", (BigNumber,), {"engine": engine})

        result = stub_number(1, 2).add(2)

        assert isinstance(result, stub_number)
        assert result.value() == "3.00"
        assert engine.calls == [
            ("mul", "1", "1", 2),
            ("add", "1.00", "2", 2),
            ("mul", "3.00", "1", 2),
        ]

    def test_default_engine_untouched(self) -> None:
        assert isinstance(BigNumber.engine, DecimalEngine)
        assert not isinstance(BigNumber.engine, RecordingEngine)
