"""
Pull Request Event Models

GitHub pull_request 이벤트 페이로드 관련 데이터 모델
"""

from typing import Any, Dict, List

from pydantic import BaseModel, validator


TRIAGE_ACTIONS = frozenset({"opened", "synchronize"})


class PullRequestEvent(BaseModel):
    """트리아지에 필요한 pull_request 이벤트 필드"""
    action: str
    number: int
    owner: str
    repo: str
    head_sha: str
    labels: List[str] = []

    @validator('number')
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v

    @validator('owner', 'repo', 'head_sha')
    def validate_not_empty(cls, v):
        if not v:
            raise ValueError('Field must not be empty')
        return v

    @validator('labels')
    def validate_labels(cls, v):
        # 중복 제거, 순서 유지
        return list(dict.fromkeys(label for label in v if label))

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PullRequestEvent":
        """이벤트 JSON에서 모델 생성 (필드가 없으면 KeyError)"""
        pull_request = payload['pull_request']
        return cls(
            action=payload['action'],
            number=payload['number'],
            owner=pull_request['base']['repo']['owner']['login'],
            repo=pull_request['base']['repo']['name'],
            head_sha=pull_request['head']['sha'],
            labels=[label['name'] for label in pull_request.get('labels', [])],
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_triage_action(self) -> bool:
        """opened / synchronize 이벤트만 코드 변경이 있음"""
        return self.action in TRIAGE_ACTIONS
