# routers/instagram.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from dependencies import get_automation
from models.instagram_model import InstagramLoginBody, InstagramPostBody
from services.errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/instagram", tags=["instagram"])


@router.post("/login")
def instagram_login(b: Optional[InstagramLoginBody] = None, automation=Depends(get_automation)):
    b = b or InstagramLoginBody()
    if not b.username or not b.password:
        raise ApiError(400, "Username and password are required.")

    result = automation.login(b.username, b.password)
    if not result.success:
        raise ApiError(401, result.error)
    return {"message": f"Logged in as {result.username}"}


@router.post("/post")
def instagram_post(b: Optional[InstagramPostBody] = None, automation=Depends(get_automation)):
    b = b or InstagramPostBody()
    # 비밀번호는 로그에 남기지 않는다
    logger.info("Data received for Instagram post: user=%s imageUrl=%s", b.username, b.imageUrl)

    if not b.username or not b.password or not b.imageUrl or not b.caption:
        raise ApiError(400, "All fields are required.")

    try:
        result = automation.post(b.username, b.password, b.imageUrl, b.caption)
    except Exception as e:
        logger.error("Error uploading post: %s", e)
        raise ApiError(500, "An error occurred while uploading the post.")

    if not result.success:
        logger.warning("Instagram post failed: %s", result.error)
        raise ApiError(500, "Failed to upload post.")
    return {"message": "Post uploaded successfully!"}
