"""
JSON Schema Contract Validators

Модуль для валидации JSON представлений уведомлений и снапшотов реестра
согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- transfer_event.json
- approval_event.json
- ledger_snapshot.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

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
            schema_name: Имя схемы без расширения (например, 'transfer_event')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
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
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика (только чтение схем, кэш неизменяемых данных)
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
        """
        Args:
            schema_name: Имя схемы для валидации
        """
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

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class TransferEventValidator(ContractValidator):
    """Валидатор для transfer_event контракта."""

    def __init__(self):
        super().__init__("transfer_event")


class ApprovalEventValidator(ContractValidator):
    """Валидатор для approval_event контракта."""

    def __init__(self):
        super().__init__("approval_event")


class LedgerSnapshotValidator(ContractValidator):
    """Валидатор для ledger_snapshot контракта."""

    def __init__(self):
        super().__init__("ledger_snapshot")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_transfer_event(data: Dict[str, Any]) -> None:
    """
    Валидация transfer_event данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TransferEventValidator().validate(data)


def validate_approval_event(data: Dict[str, Any]) -> None:
    """
    Валидация approval_event данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ApprovalEventValidator().validate(data)


def validate_ledger_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация ledger_snapshot данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    LedgerSnapshotValidator().validate(data)


def validate_event(data: Dict[str, Any]) -> None:
    """
    Валидация уведомления по полю event_type.

    Raises:
        ValidationError: Если данные не соответствуют схеме
            или event_type неизвестен
    """
    event_type = data.get("event_type")
    if event_type == "Transfer":
        validate_transfer_event(data)
    elif event_type == "Approval":
        validate_approval_event(data)
    else:
        raise ValidationError(f"Unknown event_type: {event_type!r}")
