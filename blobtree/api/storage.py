"""API Endpoints for uploading, previewing and browsing the files in storage containers."""

from typing import Annotated

from fastapi import APIRouter, File, HTTPException, Path, Query, UploadFile
from fastapi.responses import StreamingResponse

from blobtree.config import container_url, get_settings
from blobtree.models import TreeNode
from blobtree.objectstorage.documents import inline_disposition, open_inline, split_preview_path, upload_files
from blobtree.objectstorage.s3bucket import get_container
from blobtree.objectstorage.tree import build_tree
from blobtree.reindex import run_indexer

app_storage = APIRouter(prefix="", tags=["storage"])


@app_storage.post("/upload")
async def upload(files: Annotated[list[UploadFile], File(description="The files to upload")] = []) -> str:
    """
    Upload files to the default storage container, and trigger a reindex of the search index.

    Files are stored under their file name. Existing files with the same name are overwritten, empty files are skipped.
    The reindex is also triggered when no files are sent.
    """
    contents = [(f.filename or "", await f.read(), f.content_type) for f in files]
    for filename, _, _ in contents:
        if not filename:
            raise HTTPException(status_code=400, detail="Every uploaded file needs a file name")
    await upload_files(contents)
    await run_indexer()
    return "ok"


@app_storage.get("/preview/{storage_index}/{path:path}")
async def get_document_inline(
    storage_index: Annotated[int, Path(description="Index of the storage container (0 is the default container)")],
    path: Annotated[str, Path(description="The url encoded file name, followed by the url encoded mime type")],
):
    """
    Returns the requested file with an 'inline' content disposition header.
    This hints to a browser to show the file instead of downloading it.
    """
    file_name, mime_type = split_preview_path(path)
    try:
        body = await open_inline(storage_index, file_name)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return StreamingResponse(body, media_type=mime_type, headers={"Content-Disposition": inline_disposition(file_name)})


@app_storage.get("/containerTree", response_model=list[TreeNode], response_model_exclude_none=True)
async def get_container_tree(
    storage_index: Annotated[int, Query(description="Index of the storage container (0 is the default container)")] = 0,
):
    """
    Returns the virtual directory structure of a storage container, as a list containing the root node.

    Only directories are included. Files are retrieved by their full path with the preview endpoint.
    """
    settings = get_settings()
    root = await build_tree(
        get_container(storage_index),
        container_url(storage_index),
        delimiter=settings.tree_delimiter,
        max_depth=settings.tree_max_depth,
    )
    return [root]
