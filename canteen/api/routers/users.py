# canteen/api/routers/users.py
from fastapi import APIRouter, Depends

from canteen.api.deps import DOMAIN_ERRORS, get_store, to_http_error
from canteen.domain.schemas import UserCreate, UserRead
from canteen.repos.document_store import SqlDocumentStore
from canteen.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead)
def create_user(payload: UserCreate, store: SqlDocumentStore = Depends(get_store)):
    service = UserService(store)
    try:
        return service.create_user(payload)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.get("/{uid}", response_model=UserRead)
def get_user(uid: str, store: SqlDocumentStore = Depends(get_store)):
    service = UserService(store)
    try:
        return service.get_user(uid)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
