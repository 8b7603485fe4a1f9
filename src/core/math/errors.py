"""
BigNumber Errors — таксономия ошибок decimal-движка

Все ошибки наследуются от BigNumberError и дополнительно от соответствующего
builtin-исключения, чтобы вызывающий код мог ловить привычные ValueError /
ArithmeticError / OverflowError / ZeroDivisionError.

Политика распространения:
- Ошибка поднимается сразу в точке некорректной операции
- Нет retry, нет silent coercion, нет подстановки default-значений
"""


class BigNumberError(Exception):
    """Базовая ошибка для всех нарушений контракта BigNumber."""


class InvalidNumberError(BigNumberError, ValueError):
    """
    Вход не приводится к каноничной decimal-строке.

    Поднимается при конструировании и при coercion операндов сравнения
    и арифметики. Статический нормализатор (to_string) её не поднимает.
    """


class InvalidScaleError(BigNumberError, ValueError):
    """Scale отрицательный (или не int) там, где требуется scale >= 0."""


class InvalidArgumentError(BigNumberError, ValueError):
    """Недопустимый аргумент: base < 1 / exponent < 1, дробная степень."""


class NotIntegralError(BigNumberError, ArithmeticError):
    """Запрошено целое значение у числа с дробной частью."""


class IntegerOverflowError(BigNumberError, OverflowError):
    """Значение выходит за диапазон native integer платформы."""


class DivisionByZeroError(BigNumberError, ZeroDivisionError):
    """Деление или остаток по нулевому делителю."""
