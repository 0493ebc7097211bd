from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..config import Settings, get_settings
from ..dependencies import AUTH_COOKIE, get_current_fid
from ..models.user import FarcasterUser, MockSignInResponse, UserResponse
from ..security import create_access_token
from ..services.neynar import NeynarClient

router = APIRouter(prefix="/auth", tags=["Authentication"])

MOCK_USER = FarcasterUser(
    fid="999999",
    username="mockuser",
    display_name="Mock User",
    pfp_url="/images/icon.png",
    custody_address="0x0000000000000000000000000000000000000000",
    verifications=[],
)


def get_neynar_client(settings: Settings = Depends(get_settings)) -> NeynarClient:
    return NeynarClient(settings.NEYNAR_API_URL, settings.NEYNAR_API_KEY)


@router.get("/me", response_model=UserResponse)
async def get_me(
    fid: str = Depends(get_current_fid),
    neynar: NeynarClient = Depends(get_neynar_client)
):
    """Get the Farcaster profile of the signed-in user."""
    user = await neynar.fetch_user(fid)
    return UserResponse(user=user)


@router.post("/mock", response_model=MockSignInResponse)
async def mock_sign_in(
    response: Response,
    settings: Settings = Depends(get_settings)
):
    """Sign in as a fixed mock user. Local development only."""
    if not settings.IS_LOCAL_DEVELOPMENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Mock auth disabled"
        )

    max_age = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    token = create_access_token(
        settings,
        fid=MOCK_USER.fid,
        wallet_address=MOCK_USER.custody_address,
        expires_delta=max_age
    )
    # Local development usually runs over plain http
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=int(max_age.total_seconds()),
        path="/",
    )

    return MockSignInResponse(success=True, user=MOCK_USER)
