# canteen/services/user_service.py
from canteen.domain.errors import NotFoundError
from canteen.domain.models import Principal
from canteen.domain.schemas import UserCreate, UserRead
from canteen.repos.persistence import PersistenceService
from canteen.repos.user_repo import UserRepo
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, store: PersistenceService):
        self.repo = UserRepo(store)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.uid)
        if existing:
            return UserRead(**existing.model_dump())

        user = self.repo.save_user(Principal(**payload.model_dump()))
        logger.info(f"Registered user {user.uid} with role {user.role.value}")
        return UserRead(**user.model_dump())

    def get_user(self, uid: str) -> UserRead:
        user = self.repo.get_user(uid)
        if not user:
            raise NotFoundError("User not found")
        return UserRead(**user.model_dump())


class IdentityService:
    """Aktualny principal albo None (gosc / nieznany uid)."""

    def __init__(self, store: PersistenceService):
        self.repo = UserRepo(store)

    def current_principal(self, uid: str | None) -> Principal | None:
        if not uid:
            return None
        return self.repo.get_user(uid)
