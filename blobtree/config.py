"""
blobtree Configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the BLOBTREE_ENV_FILE environment variable
"""

import functools
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blobtree.objectstorage.errors import UnknownStorageIndex

ENV_PREFIX = "blobtree_"


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")
    host: Annotated[
        str,
        Field(
            description="Host this instance is served at",
        ),
    ] = "http://localhost:5000"

    s3_host: Annotated[str | None, Field(description="S3-compatible object storage host")] = None
    s3_access_key: Annotated[str | None, Field(description="S3 access key")] = None
    s3_secret_key: Annotated[str | None, Field(description="S3 secret key")] = None

    storage_containers: Annotated[
        list[str],
        Field(
            description=(
                "Buckets that can be browsed, as a JSON list. "
                "The position in the list is the storage index used by the preview endpoint; uploads go to the first one"
            ),
        ),
    ] = ["documents"]

    public_storage_url: Annotated[
        str | None,
        Field(
            description="Base address of the containers as shown in the tree. Default: s3_host",
        ),
    ] = None

    tree_delimiter: Annotated[str, Field(description="Delimiter that separates virtual directories in object keys")] = "/"

    tree_max_depth: Annotated[
        int,
        Field(
            description="Maximum depth of virtual directories before building a tree is aborted",
            gt=0,
        ),
    ] = 64

    reindex_url: Annotated[
        str | None,
        Field(
            description="URL to POST to after an upload to trigger reindexing. If not set, no reindex is triggered",
        ),
    ] = None
    reindex_api_key: Annotated[str | None, Field(description="Value of the api-key header sent with the reindex call")] = None

    @model_validator(mode="after")
    def set_public_url(self: Any) -> "Settings":
        if not self.public_storage_url:
            self.public_storage_url = self.s3_host
        if not self.tree_delimiter:
            raise ValueError("tree_delimiter cannot be empty")
        return self

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)


@functools.lru_cache()
def get_settings() -> Settings:
    # Read the env_file location first, so the .env file can be loaded before the real settings are created
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


def container_name(storage_index: int) -> str:
    """Get the bucket name for a storage index"""
    containers = get_settings().storage_containers
    if storage_index < 0 or storage_index >= len(containers):
        raise UnknownStorageIndex(
            f"Storage index {storage_index} does not exist, there are {len(containers)} containers configured"
        )
    return containers[storage_index]


def container_url(storage_index: int) -> str:
    """
    Get the base address of a container. Directory urls in the tree are this address with the directory prefix appended.
    """
    bucket = container_name(storage_index)
    base = get_settings().public_storage_url or ""
    return f"{base.rstrip('/')}/{bucket}"


def validate_settings():
    settings = get_settings()
    if not all([settings.s3_host, settings.s3_access_key, settings.s3_secret_key]):
        return (
            "Object storage is not configured. Set blobtree_s3_host, blobtree_s3_access_key and blobtree_s3_secret_key"
            " to be able to upload, preview and browse files."
        )
    if not settings.storage_containers:
        return "No storage containers configured (blobtree_storage_containers)"


if __name__ == "__main__":
    # Echo the settings
    for k, v in get_settings().model_dump().items():
        print(f"{ENV_PREFIX.upper()}{k.upper()}={v}")
