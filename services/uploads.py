# services/uploads.py
import os
import uuid
import shutil
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)


def remove_quietly(path: Path):
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error("Error cleaning up file %s: %s", path, e)


@contextmanager
def saved_upload(src: BinaryIO, upload_dir: str, suffix: str = "") -> Iterator[Path]:
    """
    업로드 스트림을 upload_dir 아래 임시 파일로 저장하고 경로를 넘긴다.
    with 블록이 어떻게 끝나든 (예외 포함) 파일은 삭제된다.
    """
    os.makedirs(upload_dir, exist_ok=True)
    path = Path(upload_dir) / f"{uuid.uuid4().hex}{suffix}"
    try:
        with open(path, "wb") as f:
            shutil.copyfileobj(src, f)
        yield path
    finally:
        remove_quietly(path)
