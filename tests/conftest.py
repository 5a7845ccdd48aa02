from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from funcstack.config import ProjectConfig, SessionMode
from funcstack.deferred.schemas import BuildFailure, BuildSuccess
from funcstack.host.app import App


class FakeToolchain:
    """Builds by handler: failures and delays are keyed by handler."""

    def __init__(
        self,
        artifact_path: Path,
        failures: Optional[dict[str, list[str]]] = None,
        delays: Optional[dict[str, float]] = None,
    ):
        self.artifact_path = str(artifact_path)
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []
        self.app: Optional[App] = None

    async def build(self, address: str, mode: str):
        self.calls.append((address, mode))
        props = self.app.deployment_pass.functions.lookup(address)
        await asyncio.sleep(self.delays.get(props.handler, 0))
        if props.handler in self.failures:
            return BuildFailure(errors=self.failures[props.handler])
        return BuildSuccess(artifact_path=self.artifact_path, handler=f"bundle.{props.handler}")


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    out = tmp_path / "artifact"
    out.mkdir()
    (out / "index.js").write_text("exports.main = async () => 'ok';\n")
    return out


@pytest.fixture
def make_app(artifact_dir: Path):
    def _make(
        mode: SessionMode = SessionMode.DEPLOY,
        debug_increase_timeout: bool = False,
        failures: Optional[dict[str, list[str]]] = None,
        delays: Optional[dict[str, float]] = None,
        with_toolchain: bool = True,
    ) -> App:
        config = ProjectConfig(
            name="demo",
            stage="test",
            mode=mode,
            debug_increase_timeout=debug_increase_timeout,
            asset_bucket="demo-assets",
        )
        toolchain = FakeToolchain(artifact_dir, failures=failures, delays=delays)
        app = App(config, toolchain=toolchain if with_toolchain else None)
        toolchain.app = app
        return app

    return _make
