"""Validation package for converted component output."""

from .base import ValidationContext, ValidationOutcome, Validator
from .output import OutputValidator

__all__ = ["OutputValidator", "ValidationContext", "ValidationOutcome", "Validator"]
