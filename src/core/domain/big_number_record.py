"""
BigNumberRecord — структурированная запись для persistence/transport

Immutable Pydantic модель {value, scale}. Соответствует JSON-контракту
contracts/schema/big_number.json.

Десериализация в BigNumber повторно прогоняет value через Normalizer и
заново применяет scale так же, как конструктор.
"""

from pydantic import BaseModel, Field, field_validator

from src.core.math.normalizer import to_string


class BigNumberRecord(BaseModel):
    """
    Сериализованное представление BigNumber.

    Immutable модель (frozen=True).
    """

    value: str = Field(..., min_length=1, description="Каноничная decimal-строка")
    scale: int = Field(..., ge=0, description="Количество дробных разрядов")

    model_config = {"frozen": True, "strict": True}

    @field_validator("value")
    @classmethod
    def validate_numeric(cls, v: str) -> str:
        """Значение должно проходить Normalizer."""
        if to_string(v) is None:
            raise ValueError(f"value {v!r} is not a valid decimal number")
        return v
