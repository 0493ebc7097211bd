from typing import Optional

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, get_settings
from .errors import Unauthorized
from .models.quiz import QuizSet
from .security import decode_access_token
from .services.quiz_config import load_quiz_set
from .services.result_store import ResultStore

AUTH_COOKIE = "auth_token"

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_fid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_token: Optional[str] = Cookie(default=None),
    settings: Settings = Depends(get_settings)
) -> str:
    """Farcaster id of the signed-in user, from a bearer token or the session cookie."""
    token = credentials.credentials if credentials else auth_token
    if not token:
        raise Unauthorized()

    token_data = decode_access_token(settings, token)
    if token_data is None or not token_data.fid:
        raise Unauthorized()

    return token_data.fid


def get_result_store(request: Request) -> Optional[ResultStore]:
    """Result store created at startup, or None if not configured."""
    return getattr(request.app.state, "result_store", None)


def get_quiz_set(request: Request) -> QuizSet:
    """Active quiz questions, loaded once at startup."""
    quiz_set = getattr(request.app.state, "quiz_set", None)
    if quiz_set is None:
        quiz_set = load_quiz_set(get_settings())
        request.app.state.quiz_set = quiz_set
    return quiz_set
