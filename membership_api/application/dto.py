import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy.orm import Query

from ..domain.errors import AuthorizationError, ValidationError

E = TypeVar("E", bound=Enum)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class Page:
    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


@dataclass
class MediaUpdateResult:
    deleted_media_count: int = 0
    added_media_count: int = 0
    added_ids: list[str] = field(default_factory=list)


def paginate(query: Query, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Page:
    """Offset pagination over an already ordered query; page is 1-based."""
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else DEFAULT_LIMIT
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=items, total=total, page=page, limit=limit)


def parse_enum(enum_cls: type[E], value: Any, message: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(message) from None


def require_owner(row, user_id: str, message: str = "Forbidden") -> None:
    if row.user_id != user_id:
        raise AuthorizationError(message)
