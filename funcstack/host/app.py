"""App - root of the construct tree."""

import logging
from typing import Any, Optional

from funcstack.build.assets import AssetStager
from funcstack.build.toolchain import BuildToolchain
from funcstack.config import ProjectConfig, SessionMode
from funcstack.deployment_pass import DeploymentPass
from funcstack.host.construct import Construct
from funcstack.host.stack import DeploymentUnit

logger = logging.getLogger(__name__)


class App(Construct):
    """Root construct holding the session mode and the active pass."""

    def __init__(self, config: ProjectConfig, toolchain: Optional[BuildToolchain] = None):
        super().__init__(None, "App")
        self.config = config
        self.toolchain = toolchain
        self.assets = AssetStager(config.asset_bucket)
        self.deployment_pass: DeploymentPass = DeploymentPass()

    @staticmethod
    def of(construct: Construct) -> "App":
        root = construct.node.root
        if not isinstance(root, App):
            raise ValueError(f"{construct!r} is not defined inside an App")
        return root

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def stage(self) -> str:
        return self.config.stage

    @property
    def mode(self) -> SessionMode:
        return self.config.mode

    @property
    def debug_increase_timeout(self) -> bool:
        return self.config.debug_increase_timeout

    @property
    def ssm_prefix(self) -> Optional[str]:
        return self.config.ssm_prefix

    @property
    def units(self) -> list[DeploymentUnit]:
        return [c for c in self.node.children if isinstance(c, DeploymentUnit)]

    def start_pass(self) -> DeploymentPass:
        """Replace the active pass with a fresh one."""
        if not self.deployment_pass.finished and self.deployment_pass.tasks.pending_count():
            logger.warning(
                f"Abandoning pass {self.deployment_pass.pass_id} with pending tasks"
            )
            self.deployment_pass.tasks.reset()
        self.deployment_pass = DeploymentPass()
        return self.deployment_pass

    def synthesize(self) -> dict[str, dict[str, Any]]:
        """Finalize the active pass and render every unit's template.

        Raises:
            DeferredBuildError: If any deferred build failed
        """
        self.deployment_pass.finalize()
        return {unit.node.id: unit.to_template() for unit in self.units}
