"""``page``/``limit`` query parsing shared by the list endpoints."""

import math
from dataclasses import dataclass

from fastapi import Query

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "totalPages": max(1, math.ceil(total / self.limit)),
        }


def _to_int(raw: str | None, default: int) -> int:
    # Lenient: garbage falls back to the default instead of a 400
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    return max(1, value or default)


def get_pagination(
    page: str | None = Query(None),
    limit: str | None = Query(None),
) -> Pagination:
    """FastAPI dependency: parse and clamp ``page`` and ``limit``."""
    return Pagination(page=_to_int(page, DEFAULT_PAGE), limit=_to_int(limit, DEFAULT_LIMIT))
