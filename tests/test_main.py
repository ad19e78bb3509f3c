from unittest import mock

from fastapi import FastAPI

import main
from config import ScheduledPostConfig, load_settings

from conftest import FakeAnalyzer, FakeAutomation, FakeStore


ENV = {"IBM_WATSON_API_KEY": "k", "IBM_WATSON_URL": "https://watson.example.com", "LOG_LEVEL": "debug"}


def test_logging_uses_level_from_loaded_settings():
    calls = []
    loaded = load_settings(dict(ENV)).model_copy(update={"scheduled_post": ScheduledPostConfig(enabled=False)})

    def fake_load():
        calls.append("load")
        return loaded

    with mock.patch.object(main, "load_settings", side_effect=fake_load), \
            mock.patch.object(main, "configure_logging", side_effect=lambda level: calls.append(("logging", level))):
        app = main.create_app(analyzer=FakeAnalyzer(), analysis_store=FakeStore(), automation=FakeAutomation())

    # .env 를 읽은 뒤의 LOG_LEVEL 로 로깅 설정
    assert calls == ["load", ("logging", "DEBUG")]
    assert app.state.settings is loaded


def test_factory_entry_point_for_uvicorn():
    # uvicorn main:create_app --factory
    from uvicorn.importer import import_from_string

    factory = import_from_string("main:create_app")
    assert factory is main.create_app
    assert not hasattr(main, "app")

    loaded = load_settings(dict(ENV)).model_copy(update={"scheduled_post": ScheduledPostConfig(enabled=False)})
    with mock.patch.object(main, "load_settings", return_value=loaded), mock.patch.object(main, "configure_logging"):
        assert isinstance(factory(analyzer=FakeAnalyzer(), analysis_store=FakeStore(), automation=FakeAutomation()), FastAPI)
