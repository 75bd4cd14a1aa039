# canteen/repos/user_repo.py
from canteen.domain.models import Principal
from canteen.repos.persistence import PersistenceService

USERS = "users"


class UserRepo:
    def __init__(self, store: PersistenceService):
        self.store = store

    def get_user(self, uid: str) -> Principal | None:
        doc = self.store.get(USERS, uid)
        if not doc:
            return None
        data = {k: v for k, v in doc.items() if k not in ("id", "updated_at")}
        return Principal.model_validate({**data, "uid": doc["id"]})

    def save_user(self, user: Principal) -> Principal:
        data = user.model_dump(mode="json", exclude={"uid"})
        data["updated_at"] = self.store.server_timestamp()
        self.store.put(USERS, user.uid, data, merge=True)
        return user
