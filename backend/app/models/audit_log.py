"""
Audit Log Database Model.

Tracks registry mutations and cascade outcomes so an operator can see
which driver deletions left vehicles behind.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from backend.app.db.session import Base
from backend.app.models.driver import utcnow


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - DRIVER_CREATED / DRIVER_UPDATED / DRIVER_DELETED
    - VEHICLE_CREATED / VEHICLE_UPDATED / VEHICLE_DELETED
    - CASCADE_COMPLETED / CASCADE_FAILED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which record it was performed on
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(32), nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # Timestamp
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
