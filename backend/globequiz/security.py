from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from .config import Settings
from .models.user import TokenData


def create_access_token(
    settings: Settings,
    fid: str,
    wallet_address: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Issue a signed session token for a Farcaster user."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {
        "fid": fid,
        "walletAddress": wallet_address,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> Optional[TokenData]:
    """Verify a session token. Returns None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    fid = payload.get("fid")
    if fid is None:
        return None
    return TokenData(fid=str(fid), walletAddress=payload.get("walletAddress"))
