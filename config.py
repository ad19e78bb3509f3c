# config.py
import os
import logging
from datetime import time, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel


class ConfigError(RuntimeError):
    pass


class ScheduledPostConfig(BaseModel):
    enabled: bool = True
    at: time = time(0, 0)
    username: str = ""
    password: str = ""
    image_url: str = ""
    caption: str = ""
    # IANA 이름 (예: "Asia/Seoul"). 비어 있으면 서버 로컬 시간
    timezone: Optional[str] = None

    def zone(self) -> Optional[tzinfo]:
        return ZoneInfo(self.timezone) if self.timezone else None

    def is_complete(self) -> bool:
        return all([self.username, self.password, self.image_url, self.caption])


class Settings(BaseModel):
    """
    서버 전체 설정. 부팅 시 한 번 만들고 app.state 로 주입한다.
    컴포넌트 안에서 os.getenv 를 직접 읽지 않는다.
    """
    watson_api_key: str
    watson_url: str
    watson_stt_url: str
    watson_version: str = "2019-07-12"
    request_timeout: float = 30.0
    log_level: str = "INFO"

    cors_origin: str = "http://localhost:3000"
    port: int = 3000
    database_url: str = "sqlite:///./sentiment.db"
    upload_dir: str = "uploads"
    row_concurrency: int = 1

    redis_url: Optional[str] = None
    instagram_session_ttl: int = 24 * 60 * 60

    scheduled_post: ScheduledPostConfig = ScheduledPostConfig()

    model_config = {"frozen": True}


def _parse_hhmm(raw: str) -> time:
    try:
        hh, mm = raw.strip().split(":")
        return time(int(hh), int(mm))
    except ValueError:
        raise ConfigError(f"SCHEDULED_POST_TIME must be HH:MM, got {raw!r}")


def _parse_tz(raw: str) -> Optional[str]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"SCHEDULED_POST_TIMEZONE is not a known time zone: {raw!r}")
    return raw


def _flag(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings(env: Optional[dict] = None) -> Settings:
    """
    환경변수(+ .env)에서 Settings 생성.
    IBM 키/URL 둘 중 하나라도 없으면 ConfigError -> 프로세스 기동 실패.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    api_key = env.get("IBM_WATSON_API_KEY", "")
    url = env.get("IBM_WATSON_URL", "")
    if not api_key or not url:
        raise ConfigError("IBM API key or URL is not set in the environment variables")

    url = url.rstrip("/")
    try:
        settings = Settings(
            watson_api_key=api_key,
            watson_url=url,
            watson_stt_url=(env.get("IBM_WATSON_STT_URL") or url).rstrip("/"),
            watson_version=env.get("IBM_WATSON_VERSION", "2019-07-12"),
            request_timeout=float(env.get("REQUEST_TIMEOUT_SECONDS", "30")),
            log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            cors_origin=env.get("CORS_ORIGIN", "http://localhost:3000"),
            port=int(env.get("PORT", "3000")),
            database_url=env.get("DATABASE_URL", "sqlite:///./sentiment.db"),
            upload_dir=env.get("UPLOAD_DIR", "uploads"),
            row_concurrency=max(1, int(env.get("ROW_CONCURRENCY", "1"))),
            redis_url=env.get("REDIS_URL") or None,
            instagram_session_ttl=int(env.get("INSTAGRAM_SESSION_TTL_SECONDS", str(24 * 60 * 60))),
            scheduled_post=ScheduledPostConfig(
                enabled=_flag(env.get("SCHEDULED_POST_ENABLED", "true")),
                at=_parse_hhmm(env.get("SCHEDULED_POST_TIME", "00:00")),
                username=env.get("SCHEDULED_POST_USERNAME", ""),
                password=env.get("SCHEDULED_POST_PASSWORD", ""),
                image_url=env.get("SCHEDULED_POST_IMAGE_URL", ""),
                caption=env.get("SCHEDULED_POST_CAPTION", ""),
                timezone=_parse_tz(env.get("SCHEDULED_POST_TIMEZONE", "")),
            ),
        )
    except ValueError as e:
        # 숫자형 환경변수 파싱 실패
        raise ConfigError(f"Invalid configuration: {e}") from e

    return settings


def configure_logging(level: str = "INFO"):
    # load_settings() 이후에 호출: LOG_LEVEL 도 .env 에서 읽힌 값이어야 한다
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s : %(message)s",
    )
