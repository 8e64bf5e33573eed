from typing import Dict, Tuple

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def page_window(page: int = 1, limit: int = DEFAULT_LIMIT) -> Tuple[int, int]:
    """Inclusive row window for a 1-based page."""
    start = (page - 1) * limit
    return start, start + limit - 1


def total_headers(page: int, limit: int, total: int) -> Dict[str, str]:
    start, end = page_window(page, limit)
    end = min(end, max(total - 1, 0))
    return {"X-Total-Count": str(total), "Content-Range": f"items {start}-{end}/{total}"}
