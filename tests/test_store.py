import pytest
from sqlalchemy import func, select

from models.db_model import AnalysisRecord, PatientSentiment
from services.analysis_store import AnalysisStore
from services.errors import PersistenceError


@pytest.fixture
def db(tmp_path):
    return AnalysisStore(f"sqlite:///{tmp_path / 'test.db'}")


def _count(db, model=AnalysisRecord):
    with db.Session() as s:
        return s.scalar(select(func.count()).select_from(model))


def test_save_analysis_creates_new_record_each_time(db):
    emotions = {"joy": 0.6, "sadness": 0.2}
    first = db.save_analysis("feeling ok. none. rest", "neutral", emotions)
    second = db.save_analysis("feeling ok. none. rest", "neutral", emotions)

    assert first != second
    assert _count(db, AnalysisRecord) == 2
    with db.Session() as s:
        rec = s.get(AnalysisRecord, first)
        assert rec.emotions == emotions
        assert rec.combined_statement == "feeling ok. none. rest"


def test_save_patient_sentiment(db):
    pk = db.save_patient_sentiment("Asha", 41, "positive", {"joy": 0.9}, "Outpatient", "India", "Pune", "MH", "F")

    assert _count(db, PatientSentiment) == 1
    with db.Session() as s:
        rec = s.get(PatientSentiment, pk)
        assert rec.age == "41"
        assert rec.city == "Pune"


def test_in_memory_sqlite_is_shared_across_sessions():
    db = AnalysisStore("sqlite://")
    db.save_analysis("x", "positive", {})

    assert _count(db) == 1


def test_write_failure_raises_persistence_error(db):
    with pytest.raises(PersistenceError):
        db.save_analysis(None, "positive", {})
