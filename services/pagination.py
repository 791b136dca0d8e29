# services/pagination.py
from typing import Any, Dict, List, Optional, Tuple

from config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def page_size(limit: Any) -> int:
    """Clamp a requested page size into [1, MAX_PAGE_SIZE]. Unparseable or zero
    values fall back to DEFAULT_PAGE_SIZE."""
    try:
        size = int(limit)
    except (TypeError, ValueError):
        size = 0
    if size == 0:
        size = DEFAULT_PAGE_SIZE
    return min(max(size, 1), MAX_PAGE_SIZE)


def build_page(items: List[Dict[str, Any]], size: int) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Trim a list fetched with one extra row and describe the page."""
    has_more = len(items) > size
    items = items[:size]
    next_cursor: Optional[str] = items[-1]["id"] if has_more and items else None
    return items, {"limit": size, "nextCursor": next_cursor, "hasMore": has_more}


def page_after(items: List[Dict[str, Any]], size: int, cursor: Optional[str] = None):
    """Cursor pagination over an already materialised result list."""
    start = 0
    if cursor:
        ids = [item["id"] for item in items]
        if cursor in ids:
            start = ids.index(cursor) + 1
    return build_page(items[start:start + size + 1], size)
