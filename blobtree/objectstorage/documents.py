import logging
from typing import AsyncIterator
from urllib.parse import quote, unquote

from blobtree.config import container_name
from blobtree.models import UploadedFile
from blobtree.objectstorage.errors import InvalidPreviewPath
from blobtree.objectstorage.s3bucket import add_s3_object, create_or_get_bucket, get_s3_object


async def upload_files(files: list[tuple[str, bytes, str | None]]) -> list[UploadedFile]:
    """
    Write (filename, data, content_type) files to the default container under their filename.
    Empty files are skipped.
    """
    if not files:
        return []
    bucket = await create_or_get_bucket(container_name(0))
    uploaded: list[UploadedFile] = []
    for filename, data, content_type in files:
        if not data:
            logging.debug(f"Skipping empty file {filename}")
            continue
        await add_s3_object(bucket, filename, data, content_type=content_type)
        uploaded.append(UploadedFile(key=filename, size=len(data)))
    logging.info(f"Uploaded {len(uploaded)} file(s) to {bucket}")
    return uploaded


def split_preview_path(path: str) -> tuple[str, str]:
    """
    Split '{file_name}/{mime_type}' into the (url decoded) file name and mime type.
    Mime types always contain exactly one slash (type/subtype), so the last two segments are the mime type.

    Clients may url-encode both parts (once or twice), so both are decoded once more here.
    """
    head, _, last = path.rpartition("/")
    last = unquote(last)
    if "/" in last:
        # the slash of the mime type was encoded, so the whole mime type is in the last segment
        file_name, mime_type = head, last
    else:
        file_name, _, main_type = head.rpartition("/")
        mime_type = f"{unquote(main_type)}/{last}"
    if not file_name or mime_type.startswith("/") or mime_type.endswith("/"):
        raise InvalidPreviewPath(f"Expected a file name followed by a mime type, got {path!r}")
    return unquote(file_name), mime_type


def inline_disposition(file_name: str) -> str:
    """
    Header value that asks the browser to show the file. Names that are not plain ascii are percent-encoded (RFC 6266)
    """
    quoted = quote(file_name)
    if quoted != file_name:
        return f"inline; filename*=utf-8''{quoted}"
    return f"inline; filename={file_name}"


async def open_inline(storage_index: int, file_name: str) -> AsyncIterator[bytes]:
    """
    Stream the bytes of a file in a container. Raises FileNotFoundError before the first chunk if it does not exist.
    """
    bucket = container_name(storage_index)
    res = await get_s3_object(bucket, file_name)
    return _iter_body(res["Body"])


async def _iter_body(body) -> AsyncIterator[bytes]:
    async with body as stream:
        async for chunk in stream.iter_chunks():
            yield chunk
