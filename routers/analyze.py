# routers/analyze.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from dependencies import get_analysis_store, get_analyzer, get_row_strategy
from models.analyze_model import AnalyzeBody, AnalyzeResponse, PatientsBody, RowResult
from services.analyze_service import analyze_statement, combine_statement
from services.batch_processor import process_rows
from services.errors import ApiError, ServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    b: Optional[AnalyzeBody] = None,
    analyzer=Depends(get_analyzer),
    store=Depends(get_analysis_store),
):
    b = b or AnalyzeBody()
    if b.is_empty():
        raise ApiError(400, "Input text is required for analysis.")

    statement = combine_statement(b.feeling, b.challenge, b.improve, b.checkCaption)
    try:
        return analyze_statement(statement, analyzer, store)
    except ServiceError as e:
        logger.error("Error in Analysis: %s (%s)", e.message, e.details)
        raise ApiError(500, "Failed to process analysis.", details=e.details or e.message)


@router.post("/predict", response_model=AnalyzeResponse)
def predict(
    b: Optional[AnalyzeBody] = None,
    analyzer=Depends(get_analyzer),
    store=Depends(get_analysis_store),
):
    # NOTE: /analyze 와 달리 빈 입력 검사가 없다 (알려진 불일치, 의도적으로 유지)
    b = b or AnalyzeBody()
    statement = combine_statement(b.feeling, b.challenge, b.improve, b.checkCaption)
    try:
        return analyze_statement(statement, analyzer, store)
    except ServiceError as e:
        logger.error("Error in analysis: %s", e.message)
        raise ApiError(500, "Failed to process the analysis.")


@router.post("/predictPatientsSentiments", response_model=List[RowResult])
def predict_patients_sentiments(
    b: Optional[PatientsBody] = None,
    analyzer=Depends(get_analyzer),
    store=Depends(get_analysis_store),
    strategy=Depends(get_row_strategy),
):
    rows = b.csvData if b else None
    if not rows:
        raise ApiError(400, "CSV data is empty or missing.")

    return process_rows(rows, analyzer, store, strategy)
