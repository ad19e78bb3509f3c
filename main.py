# main.py
# 실행: uvicorn main:create_app --factory --port 3000   (또는 python main.py)
# 모듈 수준 app 은 두지 않는다: import 만으로 .env 검증/DB 연결이 일어나지 않게.
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, configure_logging, load_settings
from dependencies import build_session_store
from routers import analyze, dataset, instagram, transcribe
from services.batch_processor import strategy_for
from services.errors import ApiError
from services.scheduler import DailyPostTrigger

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI):
    # 모든 실패 응답은 {"error": ..., "details"?: ...} JSON

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body.", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error."})


def create_app(
    settings: Optional[Settings] = None,
    *,
    analyzer=None,
    analysis_store=None,
    automation=None,
) -> FastAPI:
    """
    설정은 여기서 한 번 만들고 app.state 로 주입.
    테스트에서는 analyzer / analysis_store / automation 을 가짜로 바꿔 넣는다.
    """
    if settings is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        logger.info("Settings loaded (watson_url=%s, port=%s)", settings.watson_url, settings.port)

    if analyzer is None:
        from services.watson_client import WatsonClient
        analyzer = WatsonClient.from_settings(settings)
    if analysis_store is None:
        from services.analysis_store import AnalysisStore
        analysis_store = AnalysisStore(settings.database_url)
    if automation is None:
        from services.instagram_client import InstagramClient
        automation = InstagramClient(
            store=build_session_store(settings.redis_url),
            upload_dir=settings.upload_dir,
            session_ttl=settings.instagram_session_ttl,
            timeout=settings.request_timeout,
        )

    trigger = DailyPostTrigger(automation, settings.scheduled_post)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.scheduled_post.enabled:
            trigger.start()
        yield
        await trigger.stop()

    app = FastAPI(title="Sentiment Glue API", lifespan=lifespan)

    app.state.settings = settings
    app.state.analyzer = analyzer
    app.state.analysis_store = analysis_store
    app.state.automation = automation
    app.state.row_strategy = strategy_for(settings.row_concurrency)
    app.state.trigger = trigger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(instagram.router)
    app.include_router(analyze.router)
    app.include_router(transcribe.router)
    app.include_router(dataset.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = load_settings()
    configure_logging(_settings.log_level)
    uvicorn.run(create_app(_settings), host="0.0.0.0", port=_settings.port)
