"""Request dependencies resolving the calling customer."""

import logging

from fastapi import Depends, Header, HTTPException, status

from storefront.config import get_settings
from storefront.models.user import UserInDB
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)
settings = get_settings()


async def get_current_user(external_id: str = Header(..., alias="X-User-ID")) -> UserInDB:
    """Resolve the identity-provider user id forwarded by the auth gateway."""
    user = await user_service.get_by_external_id(external_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - user not found",
        )
    return user


async def require_admin(user: UserInDB = Depends(get_current_user)) -> UserInDB:
    """Allow only users whose email is on the admin list."""
    admins = {email.lower() for email in settings.admin_emails}
    if user.email.lower() not in admins:
        logger.warning("Admin access denied for %s", user.externalId)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - admin access only",
        )
    return user
