from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)

    # Owner of the team; every goalkeeper and statistics row below hangs off this
    coach_id = Column(Integer, ForeignKey("coaches.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    category = Column(String, nullable=True)   # e.g. "U17", "Senior"
    is_active = Column(Boolean, nullable=False, default=True)

    coach = relationship("Coach", back_populates="teams")
    goalkeepers = relationship("Goalkeeper", back_populates="team")

    __table_args__ = (
        Index("ix_team_coach_active", "coach_id", "is_active"),
    )
