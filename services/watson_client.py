# services/watson_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from services.errors import AnalysisProviderError, TranscriptionError

logger = logging.getLogger(__name__)


def _error_details(exc: requests.RequestException) -> Any:
    """
    프로바이더가 JSON 에러 바디를 줬으면 그걸, 아니면 원문 메시지.
    """
    resp = exc.response
    if resp is not None:
        try:
            return resp.json()
        except ValueError:
            if resp.text:
                return resp.text
    return str(exc)


class WatsonClient:
    """
    IBM Watson NLU / Speech-to-Text 어댑터.
    sentiment, emotion 은 각각 별도 호출 (프로바이더 배치 없음).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        stt_url: Optional[str] = None,
        version: str = "2019-07-12",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.stt_url = (stt_url or base_url).rstrip("/")
        self.version = version
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = ("apikey", api_key)

    @classmethod
    def from_settings(cls, settings) -> "WatsonClient":
        return cls(
            api_key=settings.watson_api_key,
            base_url=settings.watson_url,
            stt_url=settings.watson_stt_url,
            version=settings.watson_version,
            timeout=settings.request_timeout,
        )

    def _analyze(self, text: str, feature: str) -> Dict[str, Any]:
        if not isinstance(text, str) or not text.strip():
            raise AnalysisProviderError("Text is required for analysis.")

        payload = {"text": text, "features": {feature: {"document": True}}}
        try:
            resp = self.session.post(
                f"{self.base_url}/v1/analyze",
                params={"version": self.version},
                json=payload,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            details = _error_details(e)
            logger.error("Error in %s analysis: %s", feature, e)
            raise AnalysisProviderError(f"{feature} analysis failed", details) from e
        except ValueError as e:
            # 2xx 인데 JSON 이 아닌 경우
            raise AnalysisProviderError(f"{feature} analysis failed", str(e)) from e

    def analyze_sentiment(self, text: str) -> str:
        data = self._analyze(text, "sentiment")
        try:
            return data["sentiment"]["document"]["label"]
        except (KeyError, TypeError) as e:
            raise AnalysisProviderError("Unexpected sentiment response", data) from e

    def analyze_emotions(self, text: str) -> Dict[str, float]:
        data = self._analyze(text, "emotion")
        try:
            return data["emotion"]["document"]["emotion"]
        except (KeyError, TypeError) as e:
            raise AnalysisProviderError("Unexpected emotion response", data) from e

    def transcribe(self, audio: bytes, content_type: str) -> Any:
        """
        오디오 바이너리를 /v1/recognize 로 그대로 전송하고
        프로바이더 응답 바디를 가공 없이 돌려준다.
        """
        try:
            resp = self.session.post(
                f"{self.stt_url}/v1/recognize",
                data=audio,
                headers={"Content-Type": content_type or "application/octet-stream"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            logger.error("Error transcribing audio: %s", e)
            raise TranscriptionError("Transcription failed", _error_details(e)) from e
        except ValueError as e:
            raise TranscriptionError("Transcription failed", str(e)) from e
