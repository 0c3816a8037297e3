"""API dependencies."""

from fastapi import Header, HTTPException

from src.core.errors import ErrorCode, build_error


async def get_api_key(x_api_key: str = Header(default="test", alias="X-API-Key")) -> str:
    if not x_api_key:
        raise HTTPException(
            status_code=401,
            detail=build_error(ErrorCode.INPUT_ERROR, "auth", "Missing API Key"),
        )
    return x_api_key
