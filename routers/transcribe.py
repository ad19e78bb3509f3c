# routers/transcribe.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from dependencies import get_analyzer, get_settings
from services.errors import ApiError, ServiceError
from services.uploads import saved_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["transcribe"])


@router.post("/transcribe")
def transcribe(
    audio: Optional[UploadFile] = File(None),
    analyzer=Depends(get_analyzer),
    settings=Depends(get_settings),
):
    if audio is None:
        raise ApiError(400, "No audio file uploaded")

    with saved_upload(audio.file, settings.upload_dir) as path:
        try:
            return analyzer.transcribe(path.read_bytes(), audio.content_type)
        except ServiceError as e:
            logger.error("Error transcribing audio: %s (%s)", e.message, e.details)
            raise ApiError(500, "Failed to transcribe audio")
