"""
blobtree REST API
"""

import argparse
import asyncio
import inspect
import json
import logging
import os
import sys
from pathlib import Path

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from blobtree.config import container_url, get_settings, validate_settings
from blobtree.connections import blobtree_connections, s3_enabled
from blobtree.objectstorage.s3bucket import get_container
from blobtree.objectstorage.tree import build_tree


def run(args):
    settings = get_settings()
    logging.info(f"Starting server at port {args.port}, debug={not args.nodebug}, containers={settings.storage_containers}")
    if validate_settings():
        logging.warning(validate_settings())
    logging.info(
        "To change server config, create an .env file and/or set environment parameters,\n"
        f"{' ' * 26}see README.md, blobtree/config.py or `python -m blobtree create-env` for more information.\n"
    )

    log_config = "logging.yml" if Path("logging.yml").exists() else LOGGING_CONFIG
    uvicorn.run("blobtree.api:app", host="0.0.0.0", reload=not args.nodebug, port=int(args.port), log_config=log_config)


async def print_tree(args) -> None:
    if not s3_enabled():
        logging.error(validate_settings())
        sys.exit(1)

    settings = get_settings()
    async with blobtree_connections():
        root = await build_tree(
            get_container(args.storage_index),
            container_url(args.storage_index),
            delimiter=settings.tree_delimiter,
            max_depth=settings.tree_max_depth,
        )
    print(json.dumps([root.to_json()], indent=args.indent))


def base_env():
    return dict(
        blobtree_s3_host="http://localhost:8333",
        blobtree_s3_access_key="",
        blobtree_s3_secret_key="",
        blobtree_storage_containers='["documents"]',
    )


def create_env(args):
    if os.path.exists(".env"):
        print("*** File .env already exists, quitting ***")
        sys.exit(1)

    env = base_env()
    if args.reindex_url:
        env["blobtree_reindex_url"] = args.reindex_url
    with open(".env", "w") as f:
        for key, val in env.items():
            f.write(f"{key}={val}\n")
    os.chmod(".env", 0o600)
    print("*** Created .env file ***")


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m blobtree")

    subparsers = parser.add_subparsers(dest="action", title="action", help="Action to perform:", required=True)
    p = subparsers.add_parser("run", help="Run the backend API in development mode")
    p.add_argument(
        "--no-debug",
        action="store_true",
        dest="nodebug",
        help="Disable debug mode (useful for testing downstream clients)",
    )
    p.add_argument("-p", "--port", help="Port", default=5000)
    p.set_defaults(func=run)

    p = subparsers.add_parser("tree", help="Print the directory tree of a storage container as json")
    p.add_argument("-s", "--storage-index", type=int, default=0, help="Index of the storage container")
    p.add_argument("--indent", type=int, default=2, help="Indentation of the json output")
    p.set_defaults(func=print_tree)

    p = subparsers.add_parser("create-env", help="Create a starter .env file")
    p.add_argument("-r", "--reindex-url", help="URL to POST to after uploads to trigger reindexing")
    p.set_defaults(func=create_env)

    args = parser.parse_args()

    logging.basicConfig(format="[%(levelname)-7s:%(name)-15s] %(message)s", level=logging.INFO)
    logging.getLogger("botocore").setLevel(logging.WARNING)

    if inspect.iscoroutinefunction(args.func):
        asyncio.run(args.func(args))
    else:
        args.func(args)


if __name__ == "__main__":
    main()
