"""
Build a directory tree from the virtual directories (common prefixes) of a container.

Only directories become nodes. Files are left out of the tree on purpose: they are fetched by their full path
(see the preview endpoint), not discovered through the tree.
"""

import logging

from blobtree.models import TreeNode
from blobtree.objectstorage.errors import MalformedPrefixError, PaginationError, TreeDepthExceeded
from blobtree.objectstorage.store import ObjectStore, normalize_continuation_token

ROOT_ID = 1
ROOT_NAME = "root"
DEFAULT_MAX_DEPTH = 64


class IdCounter:
    """Hands out node ids in discovery order. Create one per tree, the root has already taken ROOT_ID."""

    def __init__(self, start: int = ROOT_ID):
        self.value = start

    def next(self) -> int:
        self.value += 1
        return self.value


def directory_name(prefix: str, delimiter: str) -> str:
    """
    The name of a virtual directory is the last segment of its prefix, e.g. 'docs/2023/' -> '2023'
    """
    if not prefix.endswith(delimiter):
        raise MalformedPrefixError(f"Directory prefix {prefix!r} does not end with delimiter {delimiter!r}")
    segments = [segment for segment in prefix.split(delimiter) if segment]
    if not segments:
        raise MalformedPrefixError(f"Directory prefix {prefix!r} has no name")
    return segments[-1]


def directory_url(container_url: str, prefix: str) -> str:
    return f"{container_url.rstrip('/')}/{prefix}"


async def build_tree(
    store: ObjectStore,
    container_url: str,
    delimiter: str = "/",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TreeNode:
    """
    Build the full directory tree of a container. The root represents the container itself and always has id 1
    and a (possibly empty) list of children.

    Any error while listing aborts the whole build.
    """
    counter = IdCounter()
    children = await expand(store, container_url, "", delimiter, counter, max_depth=max_depth)
    logging.debug(f"Built tree for {container_url} with {counter.value} nodes")
    return TreeNode(id=ROOT_ID, name=ROOT_NAME, url=container_url, children=children)


async def expand(
    store: ObjectStore,
    container_url: str,
    prefix: str,
    delimiter: str,
    counter: IdCounter,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[TreeNode]:
    """
    List the directories directly under prefix (following all pages), and recursively expand each of them.
    Directories are returned in the order the store lists them.
    """
    nodes: list[TreeNode] = []
    seen_tokens: set[str] = set()
    token: str | None = None
    while True:
        page = await store.list_hierarchy(prefix, delimiter, continuation_token=token)
        files = 0
        for item in page["items"]:
            if not item["is_dir"]:
                files += 1
                continue
            key = item["key"]
            if not (key.startswith(prefix) and len(key) > len(prefix)):
                raise MalformedPrefixError(f"Directory prefix {key!r} is not below its parent {prefix!r}")
            if depth >= max_depth:
                raise TreeDepthExceeded(key, max_depth)

            node = TreeNode(id=counter.next(), name=directory_name(key, delimiter), url=directory_url(container_url, key))
            children = await expand(store, container_url, key, delimiter, counter, depth=depth + 1, max_depth=max_depth)
            if children:
                node.children = children
            nodes.append(node)
        if files:
            logging.debug(f"Skipped {files} files under {prefix!r}")

        token = normalize_continuation_token(page["next_page_token"])
        if token is None:
            return nodes
        if token in seen_tokens:
            raise PaginationError(f"Store returned continuation token {token!r} twice while listing {prefix!r}")
        seen_tokens.add(token)
