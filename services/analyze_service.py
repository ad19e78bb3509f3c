# services/analyze_service.py
from __future__ import annotations

import logging
from typing import Optional

from models.analyze_model import AnalyzeResponse

logger = logging.getLogger(__name__)


def combine_statement(
    feeling: Optional[str],
    challenge: Optional[str],
    improve: Optional[str],
    check_caption: Optional[str] = None,
) -> str:
    """
    checkCaption 이 있으면 그대로, 없으면 "feeling. challenge. improve".
    빠진 항목은 빈 문자열로 들어간다.
    """
    if check_caption:
        return check_caption
    return f"{feeling or ''}. {challenge or ''}. {improve or ''}"


def analyze_statement(statement: str, analyzer, store) -> AnalyzeResponse:
    """
    sentiment -> emotion -> DB 저장 순서. 호출할 때마다 새 레코드가 저장된다.
    AnalysisProviderError / PersistenceError 는 그대로 올려보낸다.
    """
    sentiment = analyzer.analyze_sentiment(statement)
    emotions = analyzer.analyze_emotions(statement)
    store.save_analysis(statement, sentiment, emotions)
    logger.info("Analysis saved (sentiment=%s)", sentiment)
    return AnalyzeResponse(
        combinedStatement=statement,
        sentiment=sentiment,
        emotions=emotions,
    )
