"""Project configuration.

Loaded from a YAML file and overridden by FUNCSTACK_* environment variables.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "funcstack.yaml"

# Environment variable -> config field
ENV_OVERRIDES = {
    "FUNCSTACK_STAGE": "stage",
    "FUNCSTACK_MODE": "mode",
    "FUNCSTACK_ASSET_BUCKET": "asset_bucket",
    "FUNCSTACK_DEBUG_INCREASE_TIMEOUT": "debug_increase_timeout",
}


class SessionMode(str, Enum):
    """Ambient mode of the deployment session."""

    DEV = "dev"          # Live development, functions proxied through the bridge
    DEPLOY = "deploy"    # Normal deploy, functions are built
    REMOVE = "remove"    # Tearing down, builds are skipped


class ProjectConfig(BaseModel):
    """Settings shared by every unit in an app."""

    name: str = Field(..., description="App name")
    stage: str = Field(default="dev", description="Stage name")
    mode: SessionMode = Field(default=SessionMode.DEPLOY)
    debug_increase_timeout: bool = Field(
        default=False,
        description="Force function timeouts to the maximum in live dev",
    )
    ssm_prefix: Optional[str] = Field(
        default=None,
        description="Prefix for SSM parameters (default: /sst/{name}/{stage}/)",
    )
    asset_bucket: str = Field(
        default="cdk-assets",
        description="Bucket staged function artifacts are uploaded to",
    )

    @model_validator(mode="after")
    def _default_ssm_prefix(self) -> "ProjectConfig":
        if self.ssm_prefix is None:
            self.ssm_prefix = f"/sst/{self.name}/{self.stage}/"
        return self


def _env_overrides() -> dict:
    overrides = {}
    for env_var, field in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is None or value == "":
            continue
        if field == "debug_increase_timeout":
            overrides[field] = value.lower() in ("1", "true", "yes")
        else:
            overrides[field] = value
    return overrides


def load_project_config(path: Optional[Path] = None) -> ProjectConfig:
    """Load project config from YAML and apply environment overrides.

    Args:
        path: Config file (default: ./funcstack.yaml)

    Raises:
        FileNotFoundError: If the config file does not exist
    """
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILE
    path = Path(path)

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    overrides = _env_overrides()
    if overrides:
        logger.info(f"Applying environment overrides: {sorted(overrides)}")
    data.update(overrides)

    config = ProjectConfig.model_validate(data)
    logger.info(f"Loaded project config {config.name}/{config.stage} ({config.mode.value})")
    return config
