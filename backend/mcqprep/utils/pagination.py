from typing import Any, Dict, List, Optional, Tuple

from ..core.config import settings
from ..core.exceptions import DomainValidationError


def apply_sort(query, sort: Optional[str], columns: Dict[str, Any], default: List[Any]):
    """Order a query by a comma separated field list such as "-createdAt,title".

    columns maps the public field names to model columns; a leading "-" sorts
    descending.
    """
    if not sort:
        return query.order_by(*default)

    clauses = []
    for field in sort.split(","):
        field = field.strip()
        if not field:
            continue
        descending = field.startswith("-")
        name = field.lstrip("-+")
        column = columns.get(name)
        if column is None:
            raise DomainValidationError(
                "Validation failed",
                errors=[{"field": "sort", "message": f"Cannot sort by '{name}'"}],
            )
        clauses.append(column.desc() if descending else column.asc())
    return query.order_by(*clauses)


def page_params(page: Optional[int], limit: Optional[int], default_limit: Optional[int] = None) -> Tuple[int, int]:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else (default_limit or settings.default_page_size)
    return page, min(limit, settings.max_page_size)


def paginate(query, page: int, limit: int) -> Tuple[List[Any], int, Dict[str, Any]]:
    """Run a query for one page; returns (items, total, pagination links)"""
    total = query.order_by(None).count()
    start_index = (page - 1) * limit
    end_index = page * limit
    items = query.offset(start_index).limit(limit).all()

    pagination: Dict[str, Any] = {}
    if end_index < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if start_index > 0:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return items, total, pagination
