"""
Formatter — вывод decimal-строки с заданным количеством дробных разрядов

Два режима:
- trim_to_size=True: усечение (или дополнение нулями) до frac_digits через
  тот же truncate-at-scale примитив, что и арифметика. Никогда не округляет.
- trim_to_size=False: хвостовые нули удаляются, затем дробь дополняется
  нулями до frac_digits. Значащие разряды не усекаются: более длинная
  дробь возвращается как есть.

Examples (хранимое значение "0.102300456000000000"):
    render(..., 7)         → "0.1023004"
    render(..., 7, False)  → "0.102300456"
    render(..., 12, False) → "0.102300456000"
"""

from typing import Optional

from src.core.math.engine import DEFAULT_ENGINE, ArithmeticEngine
from src.core.math.normalizer import INTEGER_RE


def render(
    value: str,
    frac_digits: Optional[int] = None,
    trim_to_size: bool = True,
    engine: Optional[ArithmeticEngine] = None,
) -> str:
    """
    Рендер каноничной строки.

    Args:
        value: Каноничная decimal-строка (хранимое значение BigNumber)
        frac_digits: Целевое количество дробных разрядов.
            None, 0 или отрицательное → строка без изменений
        trim_to_size: Режим усечения (True) или только дополнения (False)
        engine: Движок для усечения (default: DEFAULT_ENGINE)

    Returns:
        Строка для отображения
    """
    if not frac_digits or frac_digits < 0 or INTEGER_RE.fullmatch(value):
        return value

    if trim_to_size:
        return (engine or DEFAULT_ENGINE).mul(value, "1", frac_digits)

    integral, _, fractional = value.rstrip("0").rstrip(".").partition(".")
    retain = frac_digits - len(fractional)
    if retain > 0:
        return f"{integral}.{fractional}{'0' * retain}"

    return f"{integral}.{fractional}"
