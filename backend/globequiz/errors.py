from fastapi import HTTPException, status


class Unauthorized(HTTPException):
    """No authenticated Farcaster identity on the request."""

    def __init__(self, detail: str = "unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class StoreUnavailable(HTTPException):
    """Result store is not configured or cannot be reached."""

    def __init__(self, detail: str = "result store unavailable"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )


class InvalidConfiguration(ValueError):
    """Quiz questions supplied through the environment are malformed."""


class InvalidTransition(RuntimeError):
    """Quiz session action not allowed in the current state."""


class InvalidSubmission(HTTPException):
    """Submitted results do not answer the active quiz questions."""

    def __init__(self, detail: str = "results do not match the quiz questions"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )
