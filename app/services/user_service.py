from sqlmodel import Session

from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserUpdate


class UserService:
    """
    Business logic for the mirrored user profile.

    The identity provider owns credentials and email; only the
    display name is editable here.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        Currently, only `name` is editable.
        """
        if payload.name is not None:
            current_user.name = payload.name

        return self.repo.update(session, current_user)
