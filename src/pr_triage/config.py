"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging


class ConfigurationError(ValueError):
    """설정 오류 (토큰 누락 등)"""


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    api_version: str = "v3"
    timeout_seconds: int = 30


@dataclass
class GitConfig:
    """작업 트리 설정"""
    repo_path: str = "."
    remote: str = "origin"
    base_ref: str = "origin/master"
    merge_user_name: str = "bot"
    merge_user_email: str = "b@o.t"
    timeout_seconds: int = 60


@dataclass
class EventConfig:
    """GitHub Actions 이벤트 설정"""
    event_path: Optional[str] = None
    sha: Optional[str] = None  # GITHUB_SHA


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    git: GitConfig = field(default_factory=GitConfig)
    event: EventConfig = field(default_factory=EventConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = True

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                api_version=os.getenv("GITHUB_API_VERSION", "v3"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            git=GitConfig(
                repo_path=os.getenv("TRIAGE_REPO_PATH", "."),
                remote=os.getenv("TRIAGE_REMOTE", "origin"),
                base_ref=os.getenv("TRIAGE_BASE_REF", "origin/master"),
                merge_user_name=os.getenv("TRIAGE_MERGE_USER_NAME", "bot"),
                merge_user_email=os.getenv("TRIAGE_MERGE_USER_EMAIL", "b@o.t"),
                timeout_seconds=int(os.getenv("TRIAGE_GIT_TIMEOUT", "60")),
            ),
            event=EventConfig(
                event_path=os.getenv("GITHUB_EVENT_PATH"),
                sha=os.getenv("GITHUB_SHA"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            # 명시적으로 false가 아니면 디버그 출력
            debug=os.getenv("DEBUG_ACTIONS", "true").lower() != "false",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드 (토큰과 이벤트 정보는 환경 변수 우선)"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        config = cls(
            github=GitHubConfig(**config_data.get('github', {})),
            git=GitConfig(**config_data.get('git', {})),
            event=EventConfig(**config_data.get('event', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', True),
        )
        config.github.token = os.getenv("GITHUB_TOKEN", config.github.token)
        config.event.event_path = os.getenv("GITHUB_EVENT_PATH", config.event.event_path)
        config.event.sha = os.getenv("GITHUB_SHA", config.event.sha)
        return config

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub 토큰 필수 확인
        if not self.github.token:
            errors.append("Set the GITHUB_TOKEN env variable")

        if self.github.timeout_seconds <= 0 or self.git.timeout_seconds <= 0:
            errors.append("Timeouts must be positive")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'api_version': self.github.api_version,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'git': {
                'repo_path': self.git.repo_path,
                'remote': self.git.remote,
                'base_ref': self.git.base_ref,
                'merge_user_name': self.git.merge_user_name,
                'merge_user_email': self.git.merge_user_email,
                'timeout_seconds': self.git.timeout_seconds,
            },
            'event': {
                'event_path': self.event.event_path,
                'sha': self.event.sha,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def validate(self) -> AppConfig:
        """설정 검증 후 반환"""
        self._config.validate()
        return self._config

    def update_config(self, **kwargs) -> None:
        """설정 업데이트 (None 값은 무시)"""
        config_dict = self._config.to_dict()

        for key, value in kwargs.items():
            if value is None:
                continue
            if '.' in key:
                # 중첩된 설정 (예: 'git.repo_path')
                section, name = key.split('.', 1)
                if section not in config_dict or name not in config_dict[section]:
                    raise ConfigurationError(f"Unknown setting: {key}")
                config_dict[section][name] = value
            else:
                # 최상위 설정
                config_dict[key] = value

        github = GitHubConfig(**config_dict['github'])
        github.token = self._config.github.token

        self._config = AppConfig(
            github=github,
            git=GitConfig(**config_dict['git']),
            event=EventConfig(**config_dict['event']),
            logging=LoggingConfig(**config_dict['logging']),
            debug=config_dict['debug'],
        )
        self._setup_logging()

    def _setup_logging(self) -> None:
        """로깅 설정"""
        level = "DEBUG" if self._config.debug else self._config.logging.level.upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format=self._config.logging.format,
            force=True,
        )

        # 파일 로깅이 설정된 경우 로테이션 설정
        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            # 루트 로거에 핸들러 추가
            root_logger = logging.getLogger()
            root_logger.addHandler(handler)
