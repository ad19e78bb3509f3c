# dependencies.py
import time
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


def now_ts() -> int:
    return int(time.time())


class MemoryStore:
    """프로세스 메모리 KV. 재시작하면 초기화된다."""

    def __init__(self):
        self._data: Dict[str, dict] = {}  # { key: {"val": str, "exp": int|None} }

    def get(self, key: str) -> Optional[str]:
        item = self._data.get(key)
        if not item:
            return None
        exp = item.get("exp")
        if exp and now_ts() >= exp:
            self._data.pop(key, None)
            return None
        return item.get("val")

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None):
        exp = now_ts() + int(ttl_seconds) if ttl_seconds else None
        self._data[key] = {"val": value, "exp": exp}

    def delete(self, key: str):
        self._data.pop(key, None)

    def set_json(self, key: str, obj: Any, ttl_seconds: Optional[int] = None):
        self.set(key, json.dumps(obj), ttl_seconds)

    def get_json(self, key: str) -> Any:
        raw = self.get(key)
        return json.loads(raw) if raw else None


class RedisStore(MemoryStore):
    """같은 인터페이스를 Redis 위에. REDIS_URL 이 있을 때만 사용."""

    def __init__(self, client):
        self.r = client

    def get(self, key: str) -> Optional[str]:
        return self.r.get(key)

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None):
        self.r.set(key, value, ex=int(ttl_seconds) if ttl_seconds else None)

    def delete(self, key: str):
        self.r.delete(key)


def build_session_store(redis_url: Optional[str] = None) -> MemoryStore:
    if not redis_url:
        return MemoryStore()
    import redis

    client = redis.from_url(redis_url, decode_responses=True)
    try:
        client.ping()
    except redis.RedisError as e:
        # Redis 가 죽어 있어도 부팅은 되게: 메모리로 폴백
        logger.warning("Redis unavailable (%s), using in-memory session store", e)
        return MemoryStore()
    return RedisStore(client)


# ---- FastAPI dependencies ----------------------------------------------------
# create_app() 이 app.state 에 넣어둔 컴포넌트를 라우터로 주입

def get_settings(request: Request):
    return request.app.state.settings


def get_analyzer(request: Request):
    return request.app.state.analyzer


def get_analysis_store(request: Request):
    return request.app.state.analysis_store


def get_automation(request: Request):
    return request.app.state.automation


def get_row_strategy(request: Request):
    return request.app.state.row_strategy
