# app/utils/pagination.py
"""Limit/offset pagination and search-term cleanup shared by list endpoints."""

import re
from typing import Optional
from app.config import settings

_WHITESPACE = re.compile(r"\s+")


def clamp_limit(limit: Optional[int]) -> int:
    if not limit or limit < 1:
        return settings.DEFAULT_PAGE_LIMIT
    return min(limit, settings.MAX_PAGE_LIMIT)


def sanitize_search(term: Optional[str]) -> Optional[str]:
    """Trim, collapse whitespace and escape LIKE wildcards. Empty → None."""
    if not term:
        return None
    term = _WHITESPACE.sub(" ", term).strip()[:100]
    if not term:
        return None
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def paginate(query, limit: Optional[int] = None, offset: int = 0) -> dict:
    """Run `query` for one page. Returns {"rows", "total", "limit", "offset"}."""
    limit = clamp_limit(limit)
    offset = max(0, offset or 0)
    total = query.order_by(None).count()
    rows = query.limit(limit).offset(offset).all()
    return {"rows": rows, "total": total, "limit": limit, "offset": offset}
