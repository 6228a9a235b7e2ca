"""
The object store interface the tree builder depends on: one page of a hierarchical (delimited) listing per call.
"""

from typing import Optional, Protocol

from typing_extensions import TypedDict


class HierarchyItem(TypedDict):
    key: str
    is_dir: bool


class HierarchyPage(TypedDict):
    items: list[HierarchyItem]
    next_page_token: str | None


class ObjectStore(Protocol):
    async def list_hierarchy(
        self,
        prefix: str,
        delimiter: str,
        continuation_token: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> HierarchyPage: ...


def normalize_continuation_token(token: object) -> str | None:
    """
    Stores signal 'no more pages' in different ways (a missing token, None, or an empty string).
    Return the token if there are more pages, and None otherwise.
    """
    if token is None:
        return None
    if not isinstance(token, str):
        raise TypeError(f"Continuation token should be a string, got {type(token).__name__}")
    if not token.strip():
        return None
    return token
