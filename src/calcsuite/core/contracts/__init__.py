"""
Contract Validation Module

Модуль для валидации payload форм калькуляторов против JSON Schema контрактов.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    available_schemas,
    error_field,
    validate_payload,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "validate_payload",
    "error_field",
    "available_schemas",
]
