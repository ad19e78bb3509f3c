# routers/dataset.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from dependencies import get_settings
from services.dataset_parser import parse_csv
from services.errors import ApiError, ParseError
from services.uploads import saved_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dataset"])


@router.post("/uploadDataset")
def upload_dataset(dataset: Optional[UploadFile] = File(None), settings=Depends(get_settings)):
    """
    헤더 + 데이터 행으로 된 CSV 파일을 받아 {헤더: 값} 목록으로 돌려준다.
    업로드된 임시 파일은 성공/실패와 상관없이 삭제된다.
    """
    if dataset is None:
        raise ApiError(400, "No dataset file uploaded.")

    with saved_upload(dataset.file, settings.upload_dir, suffix=".csv") as path:
        try:
            # utf-8-sig: 엑셀에서 저장한 BOM 포함 파일도 헤더가 깨지지 않게
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error handling dataset file: %s", e)
            raise ApiError(500, "Failed to process dataset file")

        try:
            data = parse_csv(text)
        except ParseError as e:
            logger.warning("Error parsing CSV file: %s", e.details)
            raise ApiError(500, "Error parsing CSV file.", details=e.details)

    return {"data": data}
