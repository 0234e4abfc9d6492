from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shiftplan.core.config import settings
from shiftplan.core.database import get_db
from shiftplan.models.manager import Manager
from shiftplan.models.restaurant import Restaurant
from shiftplan.services.records import get_restaurant

router = APIRouter()
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


def get_current_manager(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Manager:
    """Get the current authenticated manager from the bearer token."""
    payload = decode_token(credentials.credentials)
    manager_id = payload.get("sub")
    if manager_id is None or not str(manager_id).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )

    manager = db.get(Manager, int(manager_id))
    if manager is None or not manager.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Manager not found or inactive",
        )
    return manager


def get_owned_restaurant(
    restaurant_id: int,
    manager: Manager = Depends(get_current_manager),
    db: Session = Depends(get_db),
) -> Restaurant:
    """Resolve ``restaurant_id`` from the path; someone else's restaurant is a 404."""
    return get_restaurant(db, restaurant_id, manager_id=manager.manager_id)


@router.get("/me")
def get_current_manager_info(current_manager: Manager = Depends(get_current_manager)):
    """Get current authenticated manager info."""
    return {
        "manager_id": current_manager.manager_id,
        "name": current_manager.name,
        "email": current_manager.email,
    }
