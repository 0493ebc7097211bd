from pydantic import BaseModel
from typing import Optional, List


class FarcasterUser(BaseModel):
    """Farcaster profile as returned by Neynar."""
    fid: str
    username: str
    display_name: Optional[str] = None
    pfp_url: Optional[str] = None
    custody_address: Optional[str] = None
    verifications: List[str] = []


class UserResponse(BaseModel):
    """Response wrapping the signed-in user."""
    user: FarcasterUser


class MockSignInResponse(BaseModel):
    """Response for the local development sign-in."""
    success: bool = True
    user: FarcasterUser


class TokenData(BaseModel):
    """Data stored in JWT token."""
    fid: Optional[str] = None
    walletAddress: Optional[str] = None
