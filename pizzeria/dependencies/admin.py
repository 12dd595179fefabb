from fastapi import Depends, HTTPException
from pizzeria.models.user import User
from pizzeria.utils.token import get_current_user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
    return current_user
