"""blobtree API: browse, preview and upload the files in S3 storage containers."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from blobtree.api.storage import app_storage
from blobtree.connections import blobtree_connections
from blobtree.objectstorage.errors import (
    InvalidPreviewPath,
    ReindexError,
    StoreRequestError,
    TreeBuildError,
    UnknownStorageIndex,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("Starting connections...")
    async with blobtree_connections():
        yield


app = FastAPI(
    title="blobtree",
    description=__doc__ if __doc__ else "",
    openapi_tags=[
        dict(name="storage", description="Endpoints to upload, preview and browse files in storage containers"),
    ],
    lifespan=lifespan,
)
app.include_router(app_storage)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": str(exc), "error": type(exc).__name__})


@app.exception_handler(StoreRequestError)
async def store_request_exception_handler(request: Request, exc: StoreRequestError):
    logging.error(f"Object store request failed: {exc}")
    return _error_response(502, exc)


@app.exception_handler(TreeBuildError)
async def tree_build_exception_handler(request: Request, exc: TreeBuildError):
    logging.error(f"Could not build container tree: {exc}")
    return _error_response(500, exc)


@app.exception_handler(ReindexError)
async def reindex_exception_handler(request: Request, exc: ReindexError):
    logging.error(str(exc))
    return _error_response(502, exc)


@app.exception_handler(UnknownStorageIndex)
@app.exception_handler(InvalidPreviewPath)
async def bad_request_exception_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"message": str(exc)},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"message": "There was an issue with the data you sent.", "fields_invalid": exc.errors()}
    )
