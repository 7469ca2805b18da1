"""Translate user listing parameters into a MongoDB query and shape the result.

The flow is one-directional:

    raw query params -> ListOptions -> UserQuery (filter, sort, projection,
    skip, limit) -> store read -> PagedResult

Everything here is pure; the store call lives in ``UserRepository.list_users``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from user_api.domain.entities import User
from user_api.errors import InvalidSortFieldError

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = "asc"

# Whitelist of sortable fields, in the order they are reported to clients
SORT_FIELDS: Tuple[str, ...] = (
    "email",
    "created_at",
    "updated_at",
    "first_name",
    "last_name",
)
SORT_ORDERS = ("asc", "desc")

# Logical sort names that live under the nested profile document
_SORT_FIELD_PATHS = {
    "first_name": "profile.first_name",
    "last_name": "profile.last_name",
}

SEARCH_FIELDS = ("email", "profile.first_name", "profile.last_name")

ID_FIELD = "_id"


@dataclass(frozen=True)
class ListOptions:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    fields: Tuple[str, ...] = ()
    search: str = ""
    sort_by: str = DEFAULT_SORT_FIELD
    order: str = DEFAULT_SORT_ORDER

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"page_size must be within [1, {MAX_PAGE_SIZE}], got {self.page_size}"
            )
        if self.sort_by not in SORT_FIELDS:
            raise InvalidSortFieldError(SORT_FIELDS)
        if self.order not in SORT_ORDERS:
            raise ValueError(f"order must be one of {SORT_ORDERS}, got {self.order!r}")


@dataclass(frozen=True)
class UserQuery:
    filter: Dict[str, Any]
    sort: List[Tuple[str, int]]
    projection: Optional[Dict[str, int]]
    skip: int
    limit: int


@dataclass
class PagedResult:
    users: List[User] = field(default_factory=list)
    total_count: int = 0
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    total_pages: int = 0


_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_int(raw: Optional[str]) -> Optional[int]:
    # Plain decimal only: no whitespace, underscores or non-ASCII digits
    if raw is None or not _INT_PATTERN.fullmatch(raw):
        return None
    return int(raw)


def parse_page(raw: Optional[str]) -> int:
    page = _parse_int(raw)
    if page is None or page < 1:
        return DEFAULT_PAGE
    return page


def parse_page_size(raw: Optional[str]) -> int:
    page_size = _parse_int(raw)
    if page_size is None or page_size < 1 or page_size > MAX_PAGE_SIZE:
        return DEFAULT_PAGE_SIZE
    return page_size


def parse_fields(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def parse_sort_field(raw: Optional[str]) -> str:
    sort_by = (raw or "").strip()
    if not sort_by:
        return DEFAULT_SORT_FIELD
    if sort_by not in SORT_FIELDS:
        raise InvalidSortFieldError(SORT_FIELDS)
    return sort_by


def parse_sort_order(raw: Optional[str]) -> str:
    order = (raw or "").strip().lower()
    if order not in SORT_ORDERS:
        return DEFAULT_SORT_ORDER
    return order


def parse_list_options(
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    fields: Optional[str] = None,
) -> ListOptions:
    """Build ListOptions from raw query string values.

    Malformed numbers and unknown sort orders fall back to defaults. An
    unknown sort field is the only rejected input and raises
    ``InvalidSortFieldError``.
    """
    return ListOptions(
        page=parse_page(page),
        page_size=parse_page_size(page_size),
        fields=parse_fields(fields),
        search=(search or "").strip(),
        sort_by=parse_sort_field(sort),
        order=parse_sort_order(order),
    )


def build_search_filter(search: str) -> Dict[str, Any]:
    # The term is used as a regex pattern verbatim
    if not search:
        return {}
    regex = {"$regex": search, "$options": "i"}
    return {"$or": [{name: dict(regex)} for name in SEARCH_FIELDS]}


def map_sort_field(sort_by: str) -> str:
    return _SORT_FIELD_PATHS.get(sort_by, sort_by)


def build_sort(sort_by: str, order: str) -> List[Tuple[str, int]]:
    direction = -1 if order == "desc" else 1
    return [(map_sort_field(sort_by), direction)]


def build_projection(fields: Sequence[str]) -> Optional[Dict[str, int]]:
    """Inclusion projection for ``fields``; ``None`` means return every field.

    The identifier is always included unless the caller names ``_id``
    itself. ``id`` is accepted as an alias of ``_id``.
    """
    if not fields:
        return None
    projection: Dict[str, int] = {}
    for name in fields:
        projection[ID_FIELD if name == "id" else name] = 1
    projection.setdefault(ID_FIELD, 1)
    return projection


def calculate_skip(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def calculate_total_pages(total_count: int, page_size: int) -> int:
    return (total_count + page_size - 1) // page_size


def build_user_query(options: ListOptions) -> UserQuery:
    return UserQuery(
        filter=build_search_filter(options.search),
        sort=build_sort(options.sort_by, options.order),
        projection=build_projection(options.fields),
        skip=calculate_skip(options.page, options.page_size),
        limit=options.page_size,
    )


def assemble_page(
    users: List[User], total_count: int, options: ListOptions
) -> PagedResult:
    return PagedResult(
        users=users,
        total_count=total_count,
        page=options.page,
        page_size=options.page_size,
        total_pages=calculate_total_pages(total_count, options.page_size),
    )


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT_FIELD",
    "DEFAULT_SORT_ORDER",
    "MAX_PAGE_SIZE",
    "SEARCH_FIELDS",
    "SORT_FIELDS",
    "ListOptions",
    "PagedResult",
    "UserQuery",
    "assemble_page",
    "build_projection",
    "build_search_filter",
    "build_sort",
    "build_user_query",
    "calculate_skip",
    "calculate_total_pages",
    "map_sort_field",
    "parse_list_options",
]
