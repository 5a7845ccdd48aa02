"""Build dispatch, toolchain interface and artifact staging."""

from funcstack.build.assets import AssetStager, CodeLocation
from funcstack.build.dispatcher import BuildMode, initial_code, schedule_build, select_build_mode
from funcstack.build.toolchain import BuildToolchain

__all__ = [
    "AssetStager",
    "CodeLocation",
    "BuildMode",
    "BuildToolchain",
    "initial_code",
    "schedule_build",
    "select_build_mode",
]
