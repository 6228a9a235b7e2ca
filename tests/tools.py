import re
from contextlib import contextmanager
from typing import Optional

import httpx
from botocore.exceptions import ClientError

from blobtree.config import get_settings
from blobtree.objectstorage.errors import StoreRequestError


def check(response: httpx.Response, expected: int, msg: Optional[str] = None, message: Optional[str] = None):
    assert response.status_code == expected, (
        f"{msg or ''}{': ' if msg else ''}Unexpected status: received {response.status_code} != expected {expected};"
        f" reply: {response.text}"
    )
    if message and not re.search(message, response.text.lower()):
        raise AssertionError(f"Status {response.status_code} error {repr(response.text)} does not match pattern {repr(message)}")


@contextmanager
def blobtree_settings(**kargs):
    settings = get_settings()
    old_settings = settings.model_dump()
    try:
        for k, v in kargs.items():
            setattr(settings, k, v)
        yield settings
    finally:
        for k, v in old_settings.items():
            setattr(settings, k, v)


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} (mocked)"}}, operation)


class PagedStore:
    """
    In-memory store with explicit pages: listing maps a prefix to a list of pages, each a list of keys.
    Keys ending with the delimiter are directories. The token after the last page is last_token.
    """

    def __init__(self, listing: dict[str, list[list[str]]], last_token: str | None = None, fail_on: str | None = None):
        self.listing = listing
        self.last_token = last_token
        self.fail_on = fail_on
        self.calls: list[tuple[str, str | None]] = []

    async def list_hierarchy(self, prefix, delimiter, continuation_token=None, page_size=None):
        self.calls.append((prefix, continuation_token))
        if prefix == self.fail_on:
            raise StoreRequestError(f"Listing {prefix!r} failed")
        pages = self.listing.get(prefix, [[]])
        i = int(continuation_token.removeprefix("page-")) if continuation_token else 0
        items = [{"key": key, "is_dir": key.endswith(delimiter)} for key in pages[i]]
        token = f"page-{i + 1}" if i + 1 < len(pages) else self.last_token
        return {"items": items, "next_page_token": token}


class FakeBody:
    def __init__(self, data: bytes, chunk_size: int = 4):
        self.data = data
        self.chunk_size = chunk_size
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        self.closed = True

    async def iter_chunks(self):
        for i in range(0, len(self.data), self.chunk_size):
            yield self.data[i : i + self.chunk_size]


class FakeS3Client:
    """
    Mimics the parts of the S3 client that blobtree uses, with list_objects_v2 paginating like S3 does:
    common prefixes and keys together count towards MaxKeys.
    """

    def __init__(self, buckets: dict[str, dict[str, bytes]] | None = None, max_keys: int | None = None):
        self.buckets = buckets if buckets is not None else {}
        self.max_keys = max_keys
        self.fail_prefix: str | None = None
        self.list_calls: list[dict] = []
        self.content_types: dict[tuple[str, str], str] = {}

    def _bucket(self, bucket: str, operation: str) -> dict[str, bytes]:
        if bucket not in self.buckets:
            raise client_error("NoSuchBucket", operation)
        return self.buckets[bucket]

    async def list_objects_v2(self, Bucket, Delimiter=None, Prefix="", ContinuationToken=None, MaxKeys=1000):
        self.list_calls.append(
            dict(Bucket=Bucket, Delimiter=Delimiter, Prefix=Prefix, ContinuationToken=ContinuationToken, MaxKeys=MaxKeys)
        )
        if self.fail_prefix is not None and Prefix == self.fail_prefix:
            raise client_error("AccessDenied", "ListObjectsV2")
        objects = self._bucket(Bucket, "ListObjectsV2")
        max_keys = self.max_keys or MaxKeys

        entries: list[tuple[bool, str]] = []
        seen: set[str] = set()
        for key in sorted(k for k in objects if k.startswith(Prefix)):
            rest = key[len(Prefix) :]
            if Delimiter and Delimiter in rest:
                common_prefix = Prefix + rest.split(Delimiter)[0] + Delimiter
                if common_prefix not in seen:
                    seen.add(common_prefix)
                    entries.append((True, common_prefix))
            else:
                entries.append((False, key))

        start = int(ContinuationToken) if ContinuationToken else 0
        page = entries[start : start + max_keys]
        truncated = start + max_keys < len(entries)
        res: dict = {"IsTruncated": truncated, "KeyCount": len(page), "Prefix": Prefix}
        contents = [{"Key": key, "Size": len(objects[key])} for is_dir, key in page if not is_dir]
        prefixes = [{"Prefix": key} for is_dir, key in page if is_dir]
        if contents:
            res["Contents"] = contents
        if prefixes:
            res["CommonPrefixes"] = prefixes
        if truncated:
            res["NextContinuationToken"] = str(start + max_keys)
        return res

    async def head_bucket(self, Bucket):
        self._bucket(Bucket, "HeadBucket")
        return {}

    async def create_bucket(self, Bucket):
        self.buckets.setdefault(Bucket, {})
        return {}

    async def put_object(self, Bucket, Key, Body, ContentType=None):
        self._bucket(Bucket, "PutObject")[Key] = Body
        if ContentType:
            self.content_types[(Bucket, Key)] = ContentType
        return {}

    async def get_object(self, Bucket, Key):
        objects = self._bucket(Bucket, "GetObject")
        if Key not in objects:
            raise client_error("NoSuchKey", "GetObject")
        data = objects[Key]
        return {
            "Body": FakeBody(data),
            "ContentLength": len(data),
            "ContentType": self.content_types.get((Bucket, Key), "binary/octet-stream"),
        }
