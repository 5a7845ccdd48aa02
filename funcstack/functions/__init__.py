"""Functions module - declarative function props.

- schemas: FunctionProps and the permission variant
- merge: props merging against inherited defaults
- normalize: size / duration / retention parsing
- registry: per-pass map of declared functions
"""

from funcstack.functions.merge import apply_defaults, merge_props
from funcstack.functions.registry import FunctionRegistry
from funcstack.functions.schemas import (
    ALL_PERMISSIONS,
    AllPermissions,
    FunctionProps,
    FunctionSummary,
    FunctionUrlCorsProps,
    FunctionUrlProps,
)

__all__ = [
    "ALL_PERMISSIONS",
    "AllPermissions",
    "FunctionProps",
    "FunctionSummary",
    "FunctionUrlCorsProps",
    "FunctionUrlProps",
    "FunctionRegistry",
    "apply_defaults",
    "merge_props",
]
