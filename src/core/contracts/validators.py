"""
JSON Schema Contract Validators

Проверка сериализованного BigNumber ({value, scale}) до реконструкции.
Использует библиотеку jsonschema (Draft 2020-12).

Схемы поставляются в пакете (contracts/schema/):
- big_number.json — запись {value, scale}
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR: Path = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Чтение и meta-валидация схем по имени, с кэшем."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени без расширения ('big_number').

        Raises:
            FileNotFoundError: Нет файла <schema_name>.json
            ValueError: Файл не является валидной Draft 2020-12 схемой
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e}")

        self._schemas[schema_name] = schema
        return schema


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор данных против одной именованной схемы."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or SchemaLoader()).load_schema(schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое найденное нарушение контракта
        """
        self._validator.validate(data)


class BigNumberValidator(ContractValidator):
    """Контракт big_number: {"value": <каноничная строка>, "scale": <int >= 0>}."""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__("big_number", loader)


@lru_cache(maxsize=1)
def _big_number_validator() -> BigNumberValidator:
    return BigNumberValidator()


def validate_big_number(data: Dict[str, Any]) -> None:
    """
    Проверка сериализованного BigNumber перед BigNumber.from_dict.

    Raises:
        jsonschema.ValidationError: Если data не соответствует контракту
    """
    _big_number_validator().validate(data)
