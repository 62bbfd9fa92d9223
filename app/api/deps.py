"""FastAPI 의존성 주입 모듈.

FastAPI dependency injection module.
Provides the issue service to route handlers. Tests override
get_issue_service to point the service at a throwaway database.
"""

from app.services.issue_service import IssueService, issue_service


def get_issue_service() -> IssueService:
    """요청 처리에 사용할 이슈 서비스를 반환합니다.

    Return the issue service used by request handlers.

    Returns:
        IssueService: 전역 이슈 서비스 인스턴스 (Global issue service instance)
    """
    return issue_service
