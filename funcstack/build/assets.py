"""Artifact staging.

Computes where a built artifact is stored: the bucket from project config
and an object key derived from a content hash, so unchanged bundles keep
the same key across deploys.
"""

import hashlib
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class CodeLocation(BaseModel):
    """Storage binding for a staged artifact."""

    bucket_name: str
    object_key: str
    object_version: Optional[str] = None
    asset_hash: str = Field(..., description="sha256 of the artifact contents")
    asset_path: str = Field(..., description="Local path that was staged")


class AssetStager:
    """Stages artifacts into a single asset bucket."""

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name

    def stage(self, artifact_path: Union[str, Path]) -> CodeLocation:
        """Hash an artifact (file or directory) and return its location.

        Raises:
            FileNotFoundError: If the artifact does not exist
        """
        path = Path(artifact_path)
        if not path.exists():
            raise FileNotFoundError(f"Build artifact not found: {path}")

        asset_hash = calculate_asset_hash(path)
        location = CodeLocation(
            bucket_name=self.bucket_name,
            object_key=f"{asset_hash}.zip",
            asset_hash=asset_hash,
            asset_path=str(path),
        )
        logger.debug(f"Staged {path} as s3://{location.bucket_name}/{location.object_key}")
        return location


def calculate_asset_hash(path: Path) -> str:
    """Hash file contents and relative paths, in sorted order."""
    hash_obj = hashlib.sha256()

    if path.is_file():
        with open(path, "rb") as f:
            hash_obj.update(f.read())
        return hash_obj.hexdigest()

    files_to_hash = []
    for root, _, files in os.walk(path):
        for file in files:
            files_to_hash.append(os.path.join(root, file))

    for file_path in sorted(files_to_hash):
        with open(file_path, "rb") as f:
            hash_obj.update(f.read())
        rel_path = os.path.relpath(file_path, path)
        hash_obj.update(rel_path.encode())

    return hash_obj.hexdigest()
