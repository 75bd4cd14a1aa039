# canteen/api/deps.py
from functools import lru_cache

from fastapi import Depends, HTTPException, Query

from canteen.data.database import SessionLocal
from canteen.domain.errors import (
    CheckoutError,
    CheckoutInProgressError,
    CheckoutUnavailableError,
    InvalidTransition,
    NotFoundError,
    PersistenceError,
    UnauthenticatedError,
)
from canteen.domain.models import Principal
from canteen.repos.document_store import SqlDocumentStore
from canteen.services.lock_service import LockService
from canteen.services.notification_service import NotificationService
from canteen.services.user_service import IdentityService

# bledy domenowe, ktore routery tlumacza na HTTP
DOMAIN_ERRORS = (CheckoutError, InvalidTransition, PersistenceError, PermissionError, NotFoundError, ValueError)


@lru_cache
def get_store() -> SqlDocumentStore:
    # jeden store na proces: subskrypcje musza przezyc pojedynczy request
    return SqlDocumentStore(SessionLocal)


@lru_cache
def get_notification_sink() -> NotificationService:
    return NotificationService()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_principal(
    user_id: str | None = Query(None),
    store: SqlDocumentStore = Depends(get_store),
) -> Principal | None:
    try:
        return IdentityService(store).current_principal(user_id)
    except PersistenceError as e:
        raise to_http_error(e)


def require_principal(principal: Principal | None = Depends(get_principal)) -> Principal:
    if principal is None:
        raise to_http_error(UnauthenticatedError())
    return principal


def to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, UnauthenticatedError):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, CheckoutInProgressError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, CheckoutUnavailableError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, CheckoutError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, InvalidTransition):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=503, detail="Storage unavailable, please try again")
    return HTTPException(status_code=400, detail=str(e))
