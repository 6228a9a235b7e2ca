"""
Interact with S3-compatible object storage (e.g., AWS S3, MinIO, SeaweedFS, Cloudflare R2).
"""

import logging
from typing import Optional

import async_lru
from botocore.exceptions import BotoCoreError, ClientError
from types_aiobotocore_s3.client import S3Client
from types_aiobotocore_s3.type_defs import GetObjectOutputTypeDef, ListObjectsV2RequestTypeDef

from blobtree.config import container_name
from blobtree.connections import s3
from blobtree.objectstorage.errors import PaginationError, StoreRequestError
from blobtree.objectstorage.store import HierarchyItem, HierarchyPage, normalize_continuation_token


class S3Container:
    """
    A bucket seen as a container of virtual directories. Implements the ObjectStore protocol used by the tree builder.
    """

    def __init__(self, bucket: str, client: S3Client | None = None):
        self.bucket = bucket
        self._client = client

    @property
    def client(self) -> S3Client:
        return self._client if self._client is not None else s3()

    async def list_hierarchy(
        self,
        prefix: str,
        delimiter: str,
        continuation_token: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> HierarchyPage:
        params: ListObjectsV2RequestTypeDef = {"Bucket": self.bucket, "Delimiter": delimiter}
        if prefix:
            params["Prefix"] = prefix
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        if page_size:
            params["MaxKeys"] = page_size

        try:
            res = await self.client.list_objects_v2(**params)
        except (ClientError, BotoCoreError) as e:
            raise StoreRequestError(f"Listing {prefix!r} in bucket {self.bucket} failed: {e}", cause=e) from e

        items: list[HierarchyItem] = []
        for common_prefix in res.get("CommonPrefixes", []):
            if "Prefix" in common_prefix:
                items.append({"key": common_prefix["Prefix"], "is_dir": True})
        for content in res.get("Contents", []):
            if "Key" in content:
                items.append({"key": content["Key"], "is_dir": False})

        next_page_token = normalize_continuation_token(res.get("NextContinuationToken"))
        if not res.get("IsTruncated", False):
            next_page_token = None
        elif next_page_token is None:
            raise PaginationError(f"Listing {prefix!r} in bucket {self.bucket} is truncated, but has no continuation token")

        return {"items": items, "next_page_token": next_page_token}


def get_container(storage_index: int, client: S3Client | None = None) -> S3Container:
    return S3Container(container_name(storage_index), client=client)


@async_lru.alru_cache(maxsize=100)
async def create_or_get_bucket(bucket: str) -> str:
    try:
        try:
            await s3().head_bucket(Bucket=bucket)
        except ClientError as e:
            error = e.response.get("Error", {})
            if error.get("Code") in ("404", "NoSuchBucket"):
                logging.info(f"Creating bucket {bucket}")
                await s3().create_bucket(Bucket=bucket)
            else:
                raise
    except (ClientError, BotoCoreError) as e:
        raise StoreRequestError(f"Could not open bucket {bucket}: {e}", cause=e) from e
    return bucket


async def add_s3_object(bucket: str, key: str, data: bytes, content_type: str | None = None):
    try:
        if content_type:
            await s3().put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        else:
            await s3().put_object(Bucket=bucket, Key=key, Body=data)
    except (ClientError, BotoCoreError) as e:
        raise StoreRequestError(f"Writing {key} to bucket {bucket} failed: {e}", cause=e) from e


async def get_s3_object(bucket: str, key: str) -> GetObjectOutputTypeDef:
    try:
        return await s3().get_object(Bucket=bucket, Key=key)
    except ClientError as e:
        error = e.response.get("Error", {})
        if error.get("Code") in ("404", "NoSuchKey", "NoSuchBucket"):
            raise FileNotFoundError(f"Object {key} not found in bucket {bucket}")
        raise StoreRequestError(f"Reading {key} from bucket {bucket} failed: {e}", cause=e) from e
    except BotoCoreError as e:
        raise StoreRequestError(f"Reading {key} from bucket {bucket} failed: {e}", cause=e) from e
