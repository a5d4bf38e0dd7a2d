"""
Triage Result Models

라벨 조정 결과와 실행 리포트 데이터 모델
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple


class UpdateMode(Enum):
    """라벨 갱신 방식"""
    ADD = "add"
    REPLACE = "replace"


@dataclass(frozen=True)
class ReconciliationResult:
    """GitHub에 보낼 최종 라벨 집합과 갱신 방식"""
    mode: UpdateMode
    labels: Tuple[str, ...] = ()

    @classmethod
    def build(cls, mode: UpdateMode, labels: Iterable[str]) -> "ReconciliationResult":
        """빈 문자열을 제거하고 정렬된 결과 생성"""
        return cls(mode=mode, labels=tuple(sorted({label for label in labels if label})))

    @property
    def is_noop(self) -> bool:
        """보낼 라벨이 없는지 여부"""
        return not self.labels

    @property
    def replace(self) -> bool:
        return self.mode is UpdateMode.REPLACE


class TriageOutcome(Enum):
    """실행 결과. 값은 프로세스 종료 코드"""
    SUCCESS = 0
    FAILURE = 1
    # EX_CONFIG: GitHub Actions neutral status
    NEUTRAL = 78


@dataclass
class TriageReport:
    """한 번의 이벤트 처리 결과"""
    outcome: TriageOutcome
    reason: str
    result: Optional[ReconciliationResult] = None
    changed_files: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def exit_code(self) -> int:
        return self.outcome.value
