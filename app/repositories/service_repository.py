from typing import List, Optional

from app.models.service import Service
from app.repositories.base import BaseRepository


class ServiceRepository(BaseRepository):
    """Services offered by a client"""

    def get(self, client_id: int, service_id: int) -> Optional[Service]:
        return self.session.query(Service).filter(
            Service.id == service_id,
            Service.client_id == client_id
        ).first()

    def list(self, client_id: int, active_only: bool = False) -> List[Service]:
        query = self.session.query(Service).filter(Service.client_id == client_id)
        if active_only:
            query = query.filter(Service.active == True)  # noqa: E712
        return query.order_by(Service.name.asc()).all()
