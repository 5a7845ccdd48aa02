"""Cross-unit references routed through SSM parameters."""

from funcstack.references.parameters import ParameterStoreBridge
from funcstack.references.resolver import ReferenceResolver

__all__ = ["ParameterStoreBridge", "ReferenceResolver"]
