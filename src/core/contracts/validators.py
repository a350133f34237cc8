"""
JSON Schema Contract Validators

Модуль для валидации событий и котировок согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы (src/core/contracts/schema/):
- swap_event.json
- registry_change_event.json
- admin_change_event.json
- price_quote.json
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
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
            schema_name: Имя схемы без расширения (например, 'swap_event')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
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


class SwapEventValidator(ContractValidator):
    """Валидатор для swap_event контракта."""

    def __init__(self):
        super().__init__("swap_event")


class RegistryChangeEventValidator(ContractValidator):
    """Валидатор для registry_change_event контракта."""

    def __init__(self):
        super().__init__("registry_change_event")


class AdminChangeEventValidator(ContractValidator):
    """Валидатор для admin_change_event контракта."""

    def __init__(self):
        super().__init__("admin_change_event")


class PriceQuoteValidator(ContractValidator):
    """Валидатор для price_quote контракта."""

    def __init__(self):
        super().__init__("price_quote")


# Схема по имени класса события
EVENT_SCHEMAS: Dict[str, str] = {
    "SwapEvent": "swap_event",
    "RegistryChangeEvent": "registry_change_event",
    "AdminChangeEvent": "admin_change_event",
    "PriceQuote": "price_quote",
}


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_swap_event(data: Dict[str, Any]) -> None:
    """
    Валидация swap_event данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    SwapEventValidator().validate(data)


def validate_registry_change_event(data: Dict[str, Any]) -> None:
    """
    Валидация registry_change_event данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    RegistryChangeEventValidator().validate(data)


def validate_admin_change_event(data: Dict[str, Any]) -> None:
    """Валидация admin_change_event данных."""
    AdminChangeEventValidator().validate(data)


def validate_price_quote(data: Dict[str, Any]) -> None:
    """Валидация price_quote данных."""
    PriceQuoteValidator().validate(data)


def validate_model(model: Any) -> None:
    """
    Валидация pydantic модели события против её схемы.

    Args:
        model: Экземпляр SwapEvent / RegistryChangeEvent / AdminChangeEvent / PriceQuote

    Raises:
        KeyError: Если для типа модели нет схемы
        ValidationError: Если данные не соответствуют схеме
    """
    schema_name = EVENT_SCHEMAS[type(model).__name__]
    ContractValidator(schema_name).validate(model.model_dump(mode="json"))
