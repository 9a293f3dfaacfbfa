"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field, replace, asdict
from typing import Optional, Dict, Any
from pathlib import Path
import logging


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub API 및 App 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    app_identifier: Optional[int] = None
    webhook_secret: Optional[str] = None
    app_name: str = "Todo PR Checker"


@dataclass(frozen=True)
class ServerConfig:
    """웹훅 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass(frozen=True)
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        app_identifier = os.getenv("GITHUB_APP_IDENTIFIER")
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
                app_identifier=int(app_identifier) if app_identifier else None,
                webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET"),
                app_name=os.getenv("APP_FRIENDLY_NAME", "Todo PR Checker"),
            ),
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "3000")),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            github=GitHubConfig(**config_data.get('github', {})),
            server=ServerConfig(**config_data.get('server', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub 토큰 필수 확인
        if not self.github.token:
            errors.append("GitHub token is required")

        # App ID 필수 확인 (자신의 코멘트/체크 런 식별)
        if self.github.app_identifier is None:
            errors.append("GitHub App identifier is required")

        # 시크릿 없이는 모든 웹훅 서명 검증이 실패함
        if not self.github.webhook_secret:
            errors.append("GitHub webhook secret is required")

        if self.github.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        if not 0 < self.server.port < 65536:
            errors.append(f"Invalid port: {self.server.port}")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        data = asdict(self)
        # 보안상 토큰과 시크릿은 제외
        data['github'].pop('token')
        data['github'].pop('webhook_secret')
        return data


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def update_config(self, **kwargs) -> AppConfig:
        """설정 업데이트 (새 AppConfig 생성)"""
        sections = {}
        top_level = {}

        for key, value in kwargs.items():
            if '.' in key:
                # 중첩된 설정 (예: 'server.port')
                section, name = key.split('.', 1)
                if not hasattr(self._config, section):
                    raise ValueError(f"Unknown config section: {section}")
                sections.setdefault(section, {})[name] = value
            else:
                # 최상위 설정
                top_level[key] = value

        for section, values in sections.items():
            top_level[section] = replace(getattr(self._config, section), **values)

        new_config = replace(self._config, **top_level)
        new_config.validate()

        self._config = new_config
        self._setup_logging()
        return new_config

    def _setup_logging(self) -> None:
        """로깅 설정"""
        logging.basicConfig(
            level=getattr(logging, self._config.logging.level.upper()),
            format=self._config.logging.format,
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
