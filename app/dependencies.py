from fastapi import Header

from app.schemas.auth import TokenIdentity
from app.services.auth_service import decode_access_token
from app.utils.exceptions import AuthError


async def get_current_user(authorization: str = Header(default="")) -> TokenIdentity:
    scheme, _, token = authorization.partition(" ")
    if not authorization.strip() or (scheme.lower() == "bearer" and not token.strip()):
        raise AuthError("Token not provided.")
    if scheme.lower() != "bearer":
        raise AuthError("Invalid token.", status_code=403)
    return decode_access_token(token.strip())
