import pytest
from fastapi.testclient import TestClient

from config import ScheduledPostConfig, Settings
from main import create_app
from models.instagram_model import LoginFailure, LoginSuccess, PostFailure, PostSuccess
from services.errors import AnalysisProviderError, PersistenceError, TranscriptionError


class FakeAnalyzer:
    def __init__(self, fail_on=(), emotions=None):
        self.fail_on = set(fail_on)
        self.emotions = emotions or {"joy": 0.7, "sadness": 0.1, "anger": 0.05, "fear": 0.05, "disgust": 0.1}
        self.calls = []
        self.transcribe_error = None

    def analyze_sentiment(self, text):
        self.calls.append(("sentiment", text))
        if text in self.fail_on:
            raise AnalysisProviderError("sentiment analysis failed", {"code": 400, "error": "unsupported text"})
        return "negative" if "sad" in (text or "") else "positive"

    def analyze_emotions(self, text):
        self.calls.append(("emotion", text))
        if text in self.fail_on:
            raise AnalysisProviderError("emotion analysis failed", {"code": 400})
        return dict(self.emotions)

    def transcribe(self, audio, content_type):
        self.calls.append(("transcribe", content_type, audio))
        if self.transcribe_error:
            raise TranscriptionError("Transcription failed", self.transcribe_error)
        return {"results": [{"alternatives": [{"transcript": "hello world", "confidence": 0.9}]}], "result_index": 0}


class FakeStore:
    def __init__(self, fail=False):
        self.fail = fail
        self.analyses = []
        self.patients = []

    def save_analysis(self, combined_statement, sentiment, emotions):
        if self.fail:
            raise PersistenceError("Failed to save record", "database is locked")
        self.analyses.append((combined_statement, sentiment, emotions))
        return len(self.analyses)

    def save_patient_sentiment(self, name, age, sentiment, emotions, type, country, city, state, gender):
        if self.fail:
            raise PersistenceError("Failed to save record", "database is locked")
        self.patients.append(dict(name=name, age=age, sentiment=sentiment, emotions=emotions))
        return len(self.patients)


class FakeAutomation:
    def __init__(self, password="secret", post_ok=True, post_raises=None):
        self.password = password
        self.post_ok = post_ok
        self.post_raises = post_raises
        self.posts = []

    def login(self, username, password):
        if password != self.password:
            return LoginFailure(error="The password you entered is incorrect.")
        return LoginSuccess(username=username)

    def post(self, username, password, image_url, caption):
        if self.post_raises:
            raise self.post_raises
        self.posts.append((username, image_url, caption))
        if not self.post_ok:
            return PostFailure(error="upload rejected")
        return PostSuccess(media_id="123_456")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        watson_api_key="test-key",
        watson_url="https://watson.example.com",
        watson_stt_url="https://stt.example.com",
        database_url="sqlite://",
        upload_dir=str(tmp_path / "uploads"),
        scheduled_post=ScheduledPostConfig(enabled=False),
    )


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def automation():
    return FakeAutomation()


@pytest.fixture
def client(settings, analyzer, store, automation):
    app = create_app(settings, analyzer=analyzer, analysis_store=store, automation=automation)
    return TestClient(app)
