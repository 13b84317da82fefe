"""
JSON Schema Contract Validators

Модуль для валидации payload форм калькуляторов согласно JSON Schema контрактам.
Использует библиотеку jsonschema (Draft 2020-12) для проверки соответствия.

Схемы лежат в пакете: calcsuite/core/contracts/schema/<schema_name>.json
- Одна схема на форму калькулятора
- unit_conversion.json — общая схема для всех конвертеров единиц
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError
from jsonschema.exceptions import best_match


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы ищутся в каталоге schema/ рядом с этим модулем (package data).
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

    def available(self) -> list[str]:
        """Имена всех схем в каталоге (без расширения), отсортированные."""
        return sorted(p.stem for p in self._schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'hotel_cost')

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
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Валидатор payload формы против JSON Schema.

    Экземпляры кэшируются через ContractValidator.for_schema().
    """

    _cache: Dict[str, "ContractValidator"] = {}

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        """
        Args:
            schema_name: Имя схемы для валидации
            loader: Загрузчик схем (default: глобальный)
        """
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    @classmethod
    def for_schema(cls, schema_name: str) -> "ContractValidator":
        if schema_name not in cls._cache:
            cls._cache[schema_name] = cls(schema_name)
        return cls._cache[schema_name]

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        При нескольких нарушениях поднимается наиболее релевантное (best_match).

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            raise error

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """
        Итератор по всем ошибкам валидации.

        Yields:
            ValidationError объекты для каждой найденной ошибки
        """
        return self.validator.iter_errors(data)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_payload(schema_name: str, payload: Dict[str, Any]) -> None:
    """
    Валидация payload формы калькулятора.

    Args:
        schema_name: Имя схемы контракта
        payload: Данные формы

    Raises:
        ValidationError: Если данные не соответствуют схеме
        FileNotFoundError: Если схемы нет
    """
    ContractValidator.for_schema(schema_name).validate(payload)


def error_field(error: ValidationError) -> str | None:
    """
    Путь к полю, вызвавшему ошибку, в нотации "expenses[0].amount".

    Для отсутствующего обязательного поля возвращается имя этого поля.
    """
    parts: list[str] = []
    for item in error.absolute_path:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        else:
            parts.append(f".{item}" if parts else str(item))

    if error.validator == "required" and isinstance(error.instance, dict):
        missing = [name for name in error.validator_value if name not in error.instance]
        if missing:
            parts.append(f".{missing[0]}" if parts else missing[0])

    return "".join(parts) or None


def available_schemas() -> list[str]:
    return _SCHEMA_LOADER.available()
