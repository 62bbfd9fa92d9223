"""목록 쿼리 빌더 및 페이지네이션 유틸리티 모듈.

List query builder and pagination utility module.
Turns request-level filter/sort/pagination parameters into a
storage-agnostic QueryDescriptor, and computes the pagination metadata
returned alongside each page of results.

Normal-range input never raises here: unknown sort keys, bad sort orders
and out-of-range page/limit values degrade to defaults, and a page past
the end simply produces an empty result set downstream.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from app.config import settings


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# 정렬 가능 필드 — Wire sort key -> model attribute
SORTABLE_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "status": "status",
    "priority": "priority",
    "location": "location",
}

DEFAULT_SORT_BY: str = "createdAt"

# 검색 대상 필드 — Fields covered by the free-text search clause
SEARCH_FIELDS: tuple[str, ...] = ("title", "description")

# 저장소 정수 상한 — OFFSET and OFFSET+LIMIT must fit a signed 64-bit integer
INT64_MAX: int = 2**63 - 1


@dataclass(frozen=True)
class FilterClause:
    """등호 필터 절 — Equality clause `field == value`."""

    field: str
    value: str


@dataclass(frozen=True)
class SearchClause:
    """자유 텍스트 검색 절 — Case-insensitive substring match over any of `fields`."""

    term: str
    fields: tuple[str, ...] = SEARCH_FIELDS


@dataclass(frozen=True)
class QueryDescriptor:
    """저장소 독립 쿼리 설명자.

    Storage-agnostic query descriptor.

    Attributes:
        filters: 등호 필터의 논리곱 (Conjunction of equality clauses)
        search: 자유 텍스트 검색 절 (Optional free-text clause)
        sort_key: 정렬 대상 모델 속성 (Model attribute to sort by)
        sort_direction: 정렬 방향 (Sort direction)
        page: 현재 페이지, 1부터 시작 (Current page, 1-based)
        offset: 건너뛸 레코드 수 (Records to skip, (page-1)*limit clamped to the int64 range)
        limit: 페이지당 레코드 수 (Records per page)
    """

    filters: tuple[FilterClause, ...]
    search: SearchClause | None
    sort_key: str
    sort_direction: SortDirection
    page: int
    offset: int
    limit: int


def _positive_int(value: Any, default: int) -> int:
    """1 이상의 정수로 변환, 실패 시 기본값 — Coerce to an int >= 1, else default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_query(params: Mapping[str, Any]) -> QueryDescriptor:
    """요청 파라미터로 쿼리 설명자를 생성합니다.

    Build a QueryDescriptor from list request parameters.

    Args:
        params: 요청 파라미터 (page, limit, status, priority, search, sortBy, sortOrder)

    Returns:
        QueryDescriptor: 필터/정렬/페이지 정보 (Filter, sort and pagination intent)
    """
    page: int = _positive_int(params.get("page"), 1)
    limit: int = min(
        _positive_int(params.get("limit"), settings.DEFAULT_PAGE_LIMIT),
        settings.MAX_PAGE_LIMIT,
    )

    filters: list[FilterClause] = []
    for name in ("status", "priority"):
        value = _clean(params.get(name))
        if value is not None:
            filters.append(FilterClause(name, value))

    term = _clean(params.get("search"))
    search: SearchClause | None = SearchClause(term) if term is not None else None

    sort_by = params.get("sortBy") or DEFAULT_SORT_BY
    sort_key: str = SORTABLE_FIELDS.get(sort_by, SORTABLE_FIELDS[DEFAULT_SORT_BY])

    try:
        direction = SortDirection(str(params.get("sortOrder") or SortDirection.DESC.value).lower())
    except ValueError:
        direction = SortDirection.DESC

    return QueryDescriptor(
        filters=tuple(filters),
        search=search,
        sort_key=sort_key,
        sort_direction=direction,
        page=page,
        offset=min((page - 1) * limit, INT64_MAX - limit),
        limit=limit,
    )


def build_pagination(descriptor: QueryDescriptor, total: int) -> dict[str, Any]:
    """페이지네이션 메타데이터를 계산합니다.

    Compute pagination metadata for one page of results.

    Args:
        descriptor: 실행된 쿼리 설명자 (Descriptor the page was fetched with)
        total: 필터에 일치하는 전체 레코드 수 (Total matching records)

    Returns:
        dict: currentPage, totalPages, totalIssues, hasNext, hasPrev
    """
    return {
        "currentPage": descriptor.page,
        "totalPages": math.ceil(total / descriptor.limit),
        "totalIssues": total,
        "hasNext": descriptor.offset + descriptor.limit < total,
        "hasPrev": descriptor.page > 1,
    }
