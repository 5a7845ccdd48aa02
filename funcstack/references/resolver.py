"""Cross-unit layer reference resolver.

A layer created in one unit and used by a function in another cannot be
passed through a native cross-stack export: the export value is fixed once
published, and the layer version ARN changes every time the layer is
updated, so later deploys of the consuming unit would fail. Instead:

1. The consuming unit depends on the owning unit
2. The owning unit stores the layer ARN in an SSM parameter
3. The consuming unit imports the layer from that parameter at deploy time

Parameters and imports are keyed by the layer's address, so resolving the
same layer again reuses them.
"""

import logging
from typing import Any, Callable, Optional, Union

from funcstack.errors import CrossUnitResolutionError
from funcstack.host.construct import Construct
from funcstack.host.resources import ImportedLayerVersion, LayerVersion
from funcstack.host.stack import DeploymentUnit
from funcstack.host.tokens import is_unresolved
from funcstack.references.parameters import ParameterStoreBridge

logger = logging.getLogger(__name__)

LayerLike = Union[LayerVersion, ImportedLayerVersion]


class ReferenceResolver:
    """Resolves layer references for the functions of one deployment pass."""

    def __init__(
        self,
        parameters: Optional[ParameterStoreBridge] = None,
        is_frozen: Optional[Callable[[], bool]] = None,
    ):
        self.parameters = parameters or ParameterStoreBridge()
        self._is_frozen = is_frozen or (lambda: False)
        # (owning unit addr, consuming unit addr, layer addr) -> imported layer
        self._memo: dict[tuple[str, str, str], LayerLike] = {}

    @staticmethod
    def parameter_id(layer: LayerLike) -> str:
        return f"{layer.node.id}Arn-{layer.node.addr}"

    @staticmethod
    def parameter_name(owning_unit: DeploymentUnit, layer: LayerLike) -> str:
        return f"/layers/{owning_unit.node.id}/{ReferenceResolver.parameter_id(layer)}"

    @staticmethod
    def import_id(layer: LayerLike) -> str:
        return f"I{layer.node.id}-{layer.node.addr}"

    def resolve(self, scope: Construct, layer: LayerLike) -> LayerLike:
        """Return a layer usable from ``scope``.

        Args:
            scope: Construct the consuming function is declared in
            layer: Layer construct, possibly owned by another unit

        Raises:
            CrossUnitResolutionError: If called during a drain, or if the
                layer is not inside any unit
        """
        if self._is_frozen():
            raise CrossUnitResolutionError(
                f"Layer references cannot be resolved while deferred tasks drain ({layer!r})"
            )

        consuming_unit = DeploymentUnit.of(scope)
        try:
            owning_unit = DeploymentUnit.of(layer)
        except ValueError as e:
            raise CrossUnitResolutionError(f"Layer has no owning unit: {layer!r}") from e

        # Same unit, or the ARN is already a literal: use directly
        if owning_unit is consuming_unit or not is_unresolved(layer.layer_version_arn):
            return layer

        key = (owning_unit.node.addr, consuming_unit.node.addr, layer.node.addr)
        if key in self._memo:
            return self._memo[key]

        # Owning unit must be deployed first so the parameter exists
        consuming_unit.add_dependency(owning_unit)

        name = self.parameter_name(owning_unit, layer)
        self.parameters.put(owning_unit, self.parameter_id(layer), name, layer.layer_version_arn)

        import_id = self.import_id(layer)
        imported = consuming_unit.node.try_find_child(import_id)
        if imported is None:
            imported = LayerVersion.from_layer_version_arn(
                consuming_unit, import_id, self.parameters.read_at(consuming_unit, name)
            )
            logger.info(
                f"Imported layer {layer.node.id} from {owning_unit.node.id} "
                f"into {consuming_unit.node.id} via {name}"
            )
        elif not isinstance(imported, ImportedLayerVersion):
            raise CrossUnitResolutionError(
                f"Construct id {import_id} is taken by {imported!r}"
            )

        self._memo[key] = imported
        return imported

    @staticmethod
    def check_layers(layers: Optional[list[Any]]) -> None:
        """Reject layer references resolve_layers cannot handle."""
        for layer in layers or []:
            if not isinstance(layer, (str, LayerVersion, ImportedLayerVersion)):
                raise CrossUnitResolutionError(f"Unsupported layer reference: {layer!r}")

    def resolve_layers(
        self, scope: Construct, function_id: str, layers: Optional[list[Any]]
    ) -> list[LayerLike]:
        """Resolve every layer reference declared on a function.

        Plain strings are treated as literal layer version ARNs.
        """
        resolved = []
        for layer in layers or []:
            if isinstance(layer, str):
                layer_id = f"{function_id}{layer}"
                existing = scope.node.try_find_child(layer_id)
                resolved.append(
                    existing
                    if existing is not None
                    else LayerVersion.from_layer_version_arn(scope, layer_id, layer)
                )
            elif isinstance(layer, (LayerVersion, ImportedLayerVersion)):
                resolved.append(self.resolve(scope, layer))
            else:
                raise CrossUnitResolutionError(f"Unsupported layer reference: {layer!r}")
        return resolved

    def memo_size(self) -> int:
        return len(self._memo)
