"""이슈 라우터 — 커뮤니티 이슈 API.

Issue Router — List, fetch, create, update, delete and summarize issues.
List and stats responses advertise a short public cache lifetime, single
issues a longer one. These headers are advisory to intermediary caches.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Response

from app.api.deps import get_issue_service
from app.config import settings
from app.schemas.issue import DeleteResponse, IssueListResponse, IssueResponse, StatsResponse
from app.services.issue_service import IssueService

router: APIRouter = APIRouter()

ServiceDep = Annotated[IssueService, Depends(get_issue_service)]


def _cache_for(response: Response, max_age: int) -> None:
    response.headers["Cache-Control"] = f"public, max-age={max_age}"


@router.get("", response_model=IssueListResponse)
async def list_issues(
    response: Response,
    service: ServiceDep,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_LIMIT,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
) -> dict:
    """이슈 목록 조회 — 필터, 검색, 정렬, 페이지네이션."""
    result = await service.list_issues({
        "page": page,
        "limit": limit,
        "status": status,
        "priority": priority,
        "search": search,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    })
    _cache_for(response, settings.LIST_CACHE_MAX_AGE)
    return result


# /{issue_id}보다 먼저 등록 — Registered before the /{issue_id} route
@router.get("/stats/summary", response_model=StatsResponse)
async def get_issue_stats(response: Response, service: ServiceDep) -> dict:
    """상태별 이슈 통계."""
    stats = await service.get_stats()
    _cache_for(response, settings.LIST_CACHE_MAX_AGE)
    return stats


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(issue_id: str, response: Response, service: ServiceDep) -> dict:
    """이슈 상세 조회."""
    issue = await service.get_issue(issue_id)
    _cache_for(response, settings.DETAIL_CACHE_MAX_AGE)
    return service.build_response(issue)


@router.post("", status_code=201, response_model=IssueResponse)
async def create_issue(
    service: ServiceDep,
    payload: Annotated[Any, Body()] = None,
) -> dict:
    """이슈 생성."""
    issue = await service.create_issue(payload)
    return service.build_response(issue)


@router.put("/{issue_id}", response_model=IssueResponse)
async def update_issue(
    issue_id: str,
    service: ServiceDep,
    payload: Annotated[Any, Body()] = None,
) -> dict:
    """이슈 부분 수정 — 상태를 Resolved로 바꾸면 completed가 True가 됨."""
    issue = await service.update_issue(issue_id, payload)
    return service.build_response(issue)


@router.delete("/{issue_id}", response_model=DeleteResponse)
async def delete_issue(issue_id: str, service: ServiceDep) -> dict:
    """이슈 삭제."""
    receipt = await service.delete_issue(issue_id)
    return {"message": "Issue deleted successfully", "deleted_issue": receipt}
