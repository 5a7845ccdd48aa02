"""Build mode dispatch for function declarations.

Each function is declared in exactly one of three modes:

- LIVE_BRIDGE: live development. The function runs a fixed bridge bundle
  that forwards invocations to the developer's machine.
- SKIP_BUILD: the app is being removed. Inert placeholder code is written
  and nothing is built.
- DEFERRED_BUILD: normal deploys. The same placeholder is written now and a
  deferred task builds the function later and patches the template node.

The template node already exists when the deferred build finishes, so the
task looks it up again by logical id in the unit's resource arena and only
overwrites Runtime, Code and Handler.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel

from funcstack.build.assets import AssetStager, CodeLocation
from funcstack.build.toolchain import BuildToolchain
from funcstack.config import SessionMode
from funcstack.deferred.queue import DeferredTaskQueue
from funcstack.deferred.schemas import BuildFailure
from funcstack.errors import FunctionBuildError
from funcstack.functions.schemas import SUPPORTED_RUNTIMES, FunctionProps
from funcstack.host.resources import CfnResource
from funcstack.host.stack import DeploymentUnit

logger = logging.getLogger(__name__)

BRIDGE_ASSET_PATH = "support/bridge"
BRIDGE_HANDLER = "bridge.handler"
BRIDGE_RUNTIME = "nodejs16.x"
BRIDGE_ACTIONS = ["iot:*"]

PLACEHOLDER_CODE = "export function placeholder() {}"
PLACEHOLDER_HANDLER = "index.placeholder"
# Inline code is not supported for every runtime, so placeholders use Node
PLACEHOLDER_RUNTIME = "nodejs16.x"

DEBUG_TIMEOUT_SECONDS = 900


class BuildMode(str, Enum):
    """How a function's code is produced."""

    LIVE_BRIDGE = "live_bridge"
    SKIP_BUILD = "skip_build"
    DEFERRED_BUILD = "deferred_build"


class CodeFragment(BaseModel):
    """Code-related template values written at declaration time."""

    code: dict[str, Any]
    handler: str
    runtime: str
    retry_attempts: Optional[int] = None
    timeout_override: Optional[int] = None
    attach_layers: bool = True


def select_build_mode(mode: SessionMode, enable_live_dev: Optional[bool]) -> BuildMode:
    """Pick the build mode for one declaration."""
    live_dev = enable_live_dev is not False
    if live_dev and mode == SessionMode.DEV:
        return BuildMode.LIVE_BRIDGE
    if mode == SessionMode.REMOVE:
        return BuildMode.SKIP_BUILD
    return BuildMode.DEFERRED_BUILD


def initial_code(build_mode: BuildMode, debug_increase_timeout: bool = False) -> CodeFragment:
    """Code, handler and runtime to write before any build has run."""
    if build_mode == BuildMode.LIVE_BRIDGE:
        # Retries are disabled: requests retried while the debugger is
        # disconnected would be replayed on the next session
        return CodeFragment(
            code={"AssetPath": BRIDGE_ASSET_PATH},
            handler=BRIDGE_HANDLER,
            runtime=BRIDGE_RUNTIME,
            retry_attempts=0,
            timeout_override=DEBUG_TIMEOUT_SECONDS if debug_increase_timeout else None,
            attach_layers=False,
        )
    return CodeFragment(
        code={"ZipFile": PLACEHOLDER_CODE},
        handler=PLACEHOLDER_HANDLER,
        runtime=PLACEHOLDER_RUNTIME,
    )


# ============================================================================
# Runtime overrides
# ============================================================================

RuntimeOverride = Callable[[FunctionProps], Optional[str]]


def _java_provided_runtime(props: FunctionProps) -> Optional[str]:
    if props.java is not None and (props.runtime or "").startswith("java"):
        return props.java.experimental_use_provided_runtime
    return None


# Applied in order after the generic patch; the first non-None value wins
RUNTIME_OVERRIDES: list[RuntimeOverride] = [_java_provided_runtime]


def resolve_runtime(props: FunctionProps) -> str:
    for override in RUNTIME_OVERRIDES:
        runtime = override(props)
        if runtime:
            return runtime
    return SUPPORTED_RUNTIMES[props.runtime]


# ============================================================================
# Deferred build
# ============================================================================


def patch_function_code(
    resource: CfnResource,
    runtime: str,
    location: CodeLocation,
    handler: str,
) -> None:
    """Overwrite the code-related properties of a function node in place."""
    resource.properties["Runtime"] = runtime
    code = {"S3Bucket": location.bucket_name, "S3Key": location.object_key}
    if location.object_version is not None:
        code["S3ObjectVersion"] = location.object_version
    resource.properties["Code"] = code
    resource.properties["Handler"] = handler
    resource.metadata["aws:asset:path"] = location.asset_path
    resource.metadata["aws:asset:property"] = "Code"


def schedule_build(
    tasks: DeferredTaskQueue,
    toolchain: BuildToolchain,
    stager: AssetStager,
    unit: DeploymentUnit,
    logical_id: str,
    address: str,
    props: FunctionProps,
) -> None:
    """Register the deferred build-and-patch task for a function."""

    async def build_and_patch() -> CodeLocation:
        result = await toolchain.build(address, "deploy")
        if isinstance(result, BuildFailure):
            raise FunctionBuildError(props.handler, result.errors)

        location = await asyncio.to_thread(stager.stage, result.artifact_path)
        resource = unit.find_resource(logical_id)
        patch_function_code(resource, resolve_runtime(props), location, result.handler)
        logger.info(f"Built function {props.handler} -> {location.object_key}")
        return location

    tasks.register(address, build_and_patch)
