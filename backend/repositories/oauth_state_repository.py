"""OAuth state repository."""

from sqlalchemy.orm import Session

from models import OAuthState, User


class OAuthStateRepository:
    """Tracks outstanding login redirects by their state token."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user: User, state: str) -> OAuthState:
        mapping = OAuthState(state=state, user_id=user.id)
        self.db.add(mapping)
        self.db.flush()
        return mapping

    def get(self, state: str) -> OAuthState | None:
        return self.db.query(OAuthState).filter_by(state=state).first()

    def delete(self, mapping: OAuthState) -> None:
        self.db.delete(mapping)
        self.db.flush()
