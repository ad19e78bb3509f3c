# models/instagram_model.py
from pydantic import BaseModel
from typing import Literal, Optional, Union


class InstagramLoginBody(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class InstagramPostBody(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    imageUrl: Optional[str] = None
    caption: Optional[str] = None


# 예상 가능한 실패(인증 실패 등)는 예외 대신 값으로 돌려준다
class LoginSuccess(BaseModel):
    success: Literal[True] = True
    username: str


class LoginFailure(BaseModel):
    success: Literal[False] = False
    error: str


class PostSuccess(BaseModel):
    success: Literal[True] = True
    media_id: Optional[str] = None


class PostFailure(BaseModel):
    success: Literal[False] = False
    error: str


LoginResult = Union[LoginSuccess, LoginFailure]
PostResult = Union[PostSuccess, PostFailure]
