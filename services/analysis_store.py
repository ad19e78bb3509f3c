# services/analysis_store.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models.db_model import AnalysisRecord, Base, PatientSentiment
from services.errors import PersistenceError

logger = logging.getLogger(__name__)


def _engine_for(url: str):
    if url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


class AnalysisStore:
    """
    분석 결과 저장소. 쓰기 전용에 가깝고, 매 호출마다 새 레코드를 만든다.
    """

    def __init__(self, database_url: str):
        self.engine = _engine_for(database_url)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)

    def _add(self, record) -> int:
        try:
            with self.Session.begin() as s:
                s.add(record)
                s.flush()
                return record.id
        except SQLAlchemyError as e:
            logger.error("DB write failed (%s): %s", type(record).__name__, e)
            raise PersistenceError("Failed to save record", str(e)) from e

    def save_analysis(self, combined_statement: str, sentiment: str, emotions: Optional[dict]) -> int:
        return self._add(AnalysisRecord(
            combined_statement=combined_statement,
            sentiment=sentiment,
            emotions=emotions,
        ))

    def save_patient_sentiment(
        self,
        name,
        age,
        sentiment: str,
        emotions: Optional[dict],
        type,
        country,
        city,
        state,
        gender,
    ) -> int:
        return self._add(PatientSentiment(
            name=name,
            age=None if age is None else str(age),
            sentiment=sentiment,
            emotions=emotions,
            type=type,
            country=country,
            city=city,
            state=state,
            gender=gender,
        ))
