"""
Validation package for generated cities.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Pipeline stage enumeration
    - ValidationError: Exception raised on FAIL issues
    - validate_road_graph(): Road graph structure checks
    - validate_blocks(): Block and lot checks
    - validate_city(): Both of the above over a finished layout
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .rules import ValidationRule
from .checks import validate_road_graph, validate_blocks
from .city_validator import validate_city

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    'ValidationRule',
    # Checks
    'validate_road_graph',
    'validate_blocks',
    'validate_city',
]
