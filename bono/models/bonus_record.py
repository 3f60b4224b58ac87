from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from bono.database import Base

class BonusRecordRow(Base):
    __tablename__ = "bonus_records"
    __table_args__ = (
        # Record identity is (agent, normalized timestamp); row_id is storage-only
        UniqueConstraint("agent_id", "timestamp", name="uq_bonus_records_agent_timestamp"),
    )

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    agent_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    sales = Column(Float, nullable=False, default=0.0)
    quality = Column(Float, nullable=False, default=0.0)
    absenteeism = Column(Float, nullable=False, default=0.0)
    total_bono = Column(Float, nullable=False, default=0.0)
    timestamp = Column(String, nullable=False)  # normalized ISO-8601 UTC, or the raw value
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
