from typing import Any, Dict, Optional

import httpx
from fastapi import HTTPException, status

from ..models.user import FarcasterUser


class NeynarClient:
    """Client for the Neynar Farcaster API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_url = api_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "x-api-key": api_key,
            "Accept": "application/json"
        }

    async def fetch_user(self, fid: str) -> FarcasterUser:
        """
        Fetch the Farcaster profile for a fid.

        Args:
            fid: Farcaster user id

        Returns:
            The user profile
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.api_url}/farcaster/user/bulk",
                    headers=self.headers,
                    params={"fids": fid}
                )
                response.raise_for_status()
                result = response.json()
            except httpx.HTTPStatusError as e:
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail=f"Error fetching user from Neynar: {str(e)}"
                )
            except httpx.RequestError as e:
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail=f"Cannot reach Neynar: {str(e)}"
                )

        users = result.get("users") or []
        if not users:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Farcaster user {fid} not found"
            )

        return self._to_user(users[0])

    @staticmethod
    def _to_user(data: Dict[str, Any]) -> FarcasterUser:
        return FarcasterUser(
            fid=str(data.get("fid")),
            username=data.get("username", ""),
            display_name=data.get("display_name"),
            pfp_url=data.get("pfp_url"),
            custody_address=data.get("custody_address"),
            verifications=data.get("verifications") or [],
        )
