"""
Webhook Event Models

GitHub 웹훅 페이로드 검증용 pydantic 모델들
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, field_validator


REPOSITORY_NAME_PATTERN = re.compile(r'^[0-9A-Za-z\-_.]+$')


class AppRef(BaseModel):
    """이벤트를 생성한 GitHub App"""
    id: int


class HeadRef(BaseModel):
    """PR head 커밋"""
    sha: str


class PullRequestRef(BaseModel):
    """체크 런/스위트에 연결된 PR"""
    number: int
    head: Optional[HeadRef] = None

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v


class RepositoryRef(BaseModel):
    """이벤트 대상 저장소"""
    name: str
    full_name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not REPOSITORY_NAME_PATTERN.match(v):
            raise ValueError('Invalid repository name')
        return v

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if '/' not in v:
            raise ValueError('Repository must be in format "owner/repo"')
        return v


class InstallationRef(BaseModel):
    """GitHub App 설치 정보"""
    id: int


class CheckRunPayload(BaseModel):
    """`check_run` 이벤트 본문"""
    id: int
    head_sha: str
    pull_requests: List[PullRequestRef] = []
    app: Optional[AppRef] = None


class CheckSuitePayload(BaseModel):
    """`check_suite` 이벤트 본문"""
    id: int
    head_sha: str
    pull_requests: List[PullRequestRef] = []
    app: Optional[AppRef] = None


class PullRequestPayload(BaseModel):
    """`pull_request` 이벤트 본문"""
    number: int
    head: HeadRef


class WebhookEvent(BaseModel):
    """GitHub 웹훅 이벤트 공통 필드"""
    action: Optional[str] = None
    repository: RepositoryRef
    installation: Optional[InstallationRef] = None
    check_run: Optional[CheckRunPayload] = None
    check_suite: Optional[CheckSuitePayload] = None
    pull_request: Optional[PullRequestPayload] = None

    def app_id_for(self, event_type: str) -> Optional[int]:
        """이벤트 본문에 기록된 App ID"""
        payload = getattr(self, event_type, None)
        app = getattr(payload, 'app', None)
        return app.id if app else None


@dataclass(frozen=True)
class CheckRunRequest:
    """체크 런 실행 요청"""
    full_repo_name: str
    pull_number: int
    head_sha: str
    check_run_id: int

    def __post_init__(self):
        """데이터 검증"""
        if self.pull_number <= 0:
            raise ValueError("PR number must be positive")
        if '/' not in self.full_repo_name:
            raise ValueError("Repository must be in format 'owner/repo'")

    @classmethod
    def from_event(cls, event: WebhookEvent) -> "CheckRunRequest":
        """`check_run` 이벤트에서 요청 생성"""
        check_run = event.check_run
        if check_run is None or not check_run.pull_requests:
            raise ValueError("Check run event has no associated pull request")
        return cls(
            full_repo_name=event.repository.full_name,
            pull_number=check_run.pull_requests[0].number,
            head_sha=check_run.head_sha,
            check_run_id=check_run.id,
        )
