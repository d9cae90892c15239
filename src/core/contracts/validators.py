"""
JSON Schema Contract Validators

Модуль для валидации JSON-представлений пула согласно формальным
JSON Schema контрактам. Использует библиотеку jsonschema (Draft 2020-12).

Схемы (contracts/schema/):
- pool_event.json  — доменные события (Activated, Bought, Sold, ...)
- pool_state.json  — снапшот CurveState
- curve_config.json — конфигурация пула
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator
from pydantic import BaseModel


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self):
        # Определяем корень проекта (4 уровня вверх от этого файла)
        self._schema_dir = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'pool_event')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)

    def validate_model(self, model: BaseModel) -> None:
        """Валидация Pydantic модели через её JSON-представление."""
        self.validate(to_contract(model))


class PoolEventValidator(ContractValidator):
    """Валидатор для pool_event контракта."""

    def __init__(self):
        super().__init__("pool_event")


class PoolStateValidator(ContractValidator):
    """Валидатор для pool_state контракта."""

    def __init__(self):
        super().__init__("pool_state")


class CurveConfigValidator(ContractValidator):
    """Валидатор для curve_config контракта."""

    def __init__(self):
        super().__init__("curve_config")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def to_contract(model: BaseModel) -> Dict[str, Any]:
    """JSON-представление Pydantic модели (через JSON round-trip, как на проводе)."""
    return json.loads(model.model_dump_json())


def validate_pool_event(data: Dict[str, Any]) -> None:
    """
    Валидация pool_event данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    PoolEventValidator().validate(data)


def validate_pool_state(data: Dict[str, Any]) -> None:
    """
    Валидация pool_state данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    PoolStateValidator().validate(data)


def validate_curve_config(data: Dict[str, Any]) -> None:
    """
    Валидация curve_config данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    CurveConfigValidator().validate(data)
