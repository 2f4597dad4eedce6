from typing import Optional

from app.models.client import Client
from app.repositories.base import BaseRepository


class ClientRepository(BaseRepository):
    """Tenant accounts"""

    def get(self, client_id: int) -> Optional[Client]:
        return self.session.query(Client).filter(Client.id == client_id).first()

    def get_by_email(self, email: str) -> Optional[Client]:
        return self.session.query(Client).filter(
            Client.email == email.lower().strip()
        ).first()
