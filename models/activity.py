import enum

from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Text,
    Enum,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class CostLevel(str, enum.Enum):
    FREE = "free"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Activity(BaseModel, Base):
    __tablename__ = "activities"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # e.g. educational, recreational, social, diy, charity, cooking, relaxation, music, sport, other
    type = Column(String(100), nullable=False)
    participants_min = Column(Integer, nullable=True)
    participants_max = Column(Integer, nullable=True)
    cost_level = Column(
        Enum(CostLevel, name="cost_level_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=CostLevel.FREE,
    )
    duration_min = Column(Integer, nullable=True)  # minutes
    duration_max = Column(Integer, nullable=True)  # minutes
    contributor_name = Column(String(255), nullable=True)

    user = relationship("User", back_populates="activities")

    __table_args__ = (
        CheckConstraint("(participants_min IS NULL) OR (participants_min >= 1)", name="ck_activities_participants_min"),
        CheckConstraint("(participants_max IS NULL) OR (participants_max >= 1)", name="ck_activities_participants_max"),
        CheckConstraint("(duration_min IS NULL) OR (duration_min >= 1)", name="ck_activities_duration_min"),
        CheckConstraint("(duration_max IS NULL) OR (duration_max >= 1)", name="ck_activities_duration_max"),
        Index("ix_activities_type", "type"),
    )
