# services/instagram_client.py
from __future__ import annotations

import io
import logging
from typing import Callable, Optional

import requests
from instagrapi import Client
from instagrapi.exceptions import ClientError

from dependencies import MemoryStore
from models.instagram_model import (
    LoginFailure,
    LoginResult,
    LoginSuccess,
    PostFailure,
    PostResult,
    PostSuccess,
)
from services.uploads import saved_upload

logger = logging.getLogger(__name__)


def _session_key(username: str) -> str:
    return f"instagram:session:{username}"


class InstagramClient:
    """
    로그인 -> 게시 2단계 자동화.
    인증 실패 같은 예상 가능한 실패는 LoginFailure / PostFailure 로 돌려준다.

    세션 재사용: 로그인 성공 시 instagrapi 세션 설정을 store 에 TTL 로 캐시하고,
    다음 로그인 때 먼저 불러온다.
    """

    def __init__(
        self,
        store: MemoryStore,
        upload_dir: str = "uploads",
        session_ttl: int = 24 * 60 * 60,
        timeout: float = 30.0,
        client_factory: Callable[[], Client] = Client,
        http: Optional[requests.Session] = None,
    ):
        self.store = store
        self.upload_dir = upload_dir
        self.session_ttl = session_ttl
        self.timeout = timeout
        self.client_factory = client_factory
        self.http = http or requests.Session()

    def _authenticate(self, username: str, password: str) -> Client:
        cl = self.client_factory()
        cached = self.store.get_json(_session_key(username))
        if cached:
            cl.set_settings(cached)
        try:
            cl.login(username, password)
        except ClientError:
            # 캐시된 세션이 만료됐을 수 있으니 버린다
            self.store.delete(_session_key(username))
            raise
        self.store.set_json(_session_key(username), cl.get_settings(), self.session_ttl)
        return cl

    def login(self, username: str, password: str) -> LoginResult:
        try:
            self._authenticate(username, password)
        except ClientError as e:
            logger.warning("Instagram login failed for %s: %s", username, e)
            return LoginFailure(error=str(e) or type(e).__name__)
        logger.info("Logged in to Instagram as %s", username)
        return LoginSuccess(username=username)

    def _download(self, image_url: str) -> bytes:
        resp = self.http.get(image_url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content

    def post(self, username: str, password: str, image_url: str, caption: str) -> PostResult:
        try:
            cl = self._authenticate(username, password)
        except ClientError as e:
            logger.warning("Instagram login failed for %s: %s", username, e)
            return PostFailure(error=str(e) or type(e).__name__)

        try:
            image = self._download(image_url)
        except requests.RequestException as e:
            logger.error("Could not fetch image %s: %s", image_url, e)
            return PostFailure(error=f"Could not fetch image: {e}")

        with saved_upload(io.BytesIO(image), self.upload_dir, suffix=".jpg") as path:
            try:
                media = cl.photo_upload(path, caption)
            except ClientError as e:
                logger.error("Instagram upload failed for %s: %s", username, e)
                return PostFailure(error=str(e) or type(e).__name__)

        media_id = getattr(media, "id", None)
        logger.info("Posted to Instagram as %s (media %s)", username, media_id)
        return PostSuccess(media_id=str(media_id) if media_id is not None else None)
