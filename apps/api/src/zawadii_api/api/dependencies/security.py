from fastapi import Header, HTTPException, status

from zawadii_api.core.settings import settings


async def require_operator_api_key(x_api_key: str = Header("", alias="X-API-Key")) -> None:
    if not settings.operator_api_key:
        return

    if x_api_key != settings.operator_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )


async def admin_confirmation(x_admin_key: str = Header("", alias="X-Admin-Key")) -> bool:
    """True when the caller proved administrator rights for destructive actions."""

    if not settings.admin_api_key or not x_admin_key:
        return False
    if x_admin_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid administrator key",
        )
    return True
