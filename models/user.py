from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Text, Index
from sqlalchemy.orm import deferred, relationship


class User(BaseModel, Base):
    __tablename__ = "users"
    email = Column(String(255), nullable=False)
    username = Column(String(100), nullable=True)
    # Sensitive columns are never part of a default read; repositories
    # undefer them explicitly.
    password_hash = deferred(Column(Text, nullable=False))
    refresh_fingerprint = deferred(Column(Text, nullable=True))

    activities = relationship(
        "Activity",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_username", "username", unique=True),
    )
