from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional

from warehub.config.database import get_db
from warehub.shared.database.models import User
from warehub.shared.enums import Role
from warehub.core.auth.service import AuthService
from warehub.core.auth.policy import has_any_role
from warehub.core.exceptions import Unauthorized, Forbidden

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the bearer token; roles come from the database"""

    if credentials is None or not credentials.credentials:
        raise Unauthorized()

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise Unauthorized("Invalid or expired token")

    user_id = payload.get("user_id") or payload.get("sub")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()

    if user is None or not user.is_active:
        raise Unauthorized()

    return user


def require_roles(allowed_roles: List[Role]):
    """Dependency factory: caller must hold at least one of the roles"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_any_role(current_user.roles, allowed_roles):
            raise Forbidden()
        return current_user
    return role_checker


# Role-specific dependencies
def get_merchant_user(current_user: User = Depends(require_roles([Role.MERCHANT]))):
    return current_user

def get_owner_user(current_user: User = Depends(require_roles([Role.WAREHOUSE_OWNER]))):
    return current_user

def get_admin_user(current_user: User = Depends(require_roles([Role.ADMIN]))):
    return current_user
