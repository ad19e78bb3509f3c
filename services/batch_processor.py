# services/batch_processor.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Sequence, TypeVar, Union

from pydantic import ValidationError as RowValidationError

from models.analyze_model import PatientRow, RowResult

logger = logging.getLogger(__name__)

ERROR_SENTIMENT = "Error processing sentiment"

T = TypeVar("T")
R = TypeVar("R")


class SequentialRowStrategy:
    """한 줄씩 순서대로. 총 지연 = 행 수 x 왕복 시간."""

    def run(self, rows: Sequence[T], fn: Callable[[T], R]) -> List[R]:
        return [fn(row) for row in rows]


class ConcurrentRowStrategy:
    """
    스레드 풀로 fan-out. executor.map 이 입력 순서를 유지하므로
    결과 순서 = 입력 순서.
    """

    def __init__(self, max_workers: int = 4):
        self.max_workers = max(1, int(max_workers))

    def run(self, rows: Sequence[T], fn: Callable[[T], R]) -> List[R]:
        if not rows:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(rows))) as pool:
            return list(pool.map(fn, rows))


def strategy_for(concurrency: int):
    if concurrency and concurrency > 1:
        return ConcurrentRowStrategy(concurrency)
    return SequentialRowStrategy()


_TEXT_COLUMNS = (
    ("name", "Name"),
    ("type", "Type"),
    ("country", "Country"),
    ("city", "City"),
    ("state", "State"),
    ("gender", "Gender"),
)


def _loose_base(raw: Any) -> dict:
    # 검증 실패한 행: 스칼라 값만 골라서 응답에 되돌려준다
    data = raw if isinstance(raw, dict) else {}
    base = {}
    for field, header in _TEXT_COLUMNS:
        value = data.get(header)
        base[field] = str(value) if isinstance(value, (str, int, float)) else None
    age = data.get("Age")
    base["age"] = age if isinstance(age, (str, int, float)) else None
    return base


def process_row(row: Union[PatientRow, Any], analyzer, store) -> RowResult:
    if not isinstance(row, PatientRow):
        try:
            row = PatientRow.model_validate(row)
        except RowValidationError as e:
            logger.error("Invalid patient row (%d errors), skipped", e.error_count())
            return RowResult(sentiment=ERROR_SENTIMENT, emotions=None, **_loose_base(row))

    base = {
        "name": row.name,
        "age": row.age,
        "type": row.type,
        "country": row.country,
        "city": row.city,
        "state": row.state,
        "gender": row.gender,
    }
    try:
        sentiment = analyzer.analyze_sentiment(row.sentiment)
        emotions = analyzer.analyze_emotions(row.sentiment)
        store.save_patient_sentiment(
            row.name,
            row.age,
            sentiment,
            emotions,
            row.type,
            row.country,
            row.city,
            row.state,
            row.gender,
        )
    except Exception as e:
        # 한 행 실패가 배치 전체를 멈추지 않는다
        logger.error("Error processing row for %s: %s", row.name, e)
        return RowResult(sentiment=ERROR_SENTIMENT, emotions=None, **base)
    return RowResult(sentiment=sentiment, emotions=emotions, **base)


def process_rows(rows: Sequence[Union[PatientRow, Any]], analyzer, store, strategy=None) -> List[RowResult]:
    strategy = strategy or SequentialRowStrategy()
    results = strategy.run(rows, lambda row: process_row(row, analyzer, store))
    failed = sum(1 for r in results if r.sentiment == ERROR_SENTIMENT)
    logger.info("Processed %d rows (%d failed)", len(results), failed)
    return results
