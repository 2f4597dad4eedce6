"""
Database Repository Layer

Repositories wrap a SQLAlchemy session handed to them at construction;
they never open sessions or commit on their own. Transaction boundaries
belong to the service layer.
"""
import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class BaseRepository:
    """Base repository with common database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: Session instance for database operations
        """
        self.session = session

    def add(self, instance):
        """Stage an instance and flush so generated keys are populated"""
        self.session.add(instance)
        self.session.flush()
        return instance
