from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Goalkeeper(Base):
    __tablename__ = "goalkeepers"

    id = Column(Integer, primary_key=True, index=True)

    # Nullable: the roster subsystem may leave a goalkeeper without a team
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True, index=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    jersey_number = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    team = relationship("Team", back_populates="goalkeepers", lazy="joined")

    __table_args__ = (
        Index("ix_goalkeepers_team_name", "team_id", "last_name", "first_name"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
