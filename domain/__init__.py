"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- errors: InvalidInputError raised on unusable inputs
- schemas: Pydantic result models
- evaluation: Confusion matrices and two-class metrics
"""

from domain.errors import InvalidInputError
from domain.schemas import BinaryMetrics

__all__ = [
    "InvalidInputError",
    "BinaryMetrics",
]
