from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base

# Raw per-season counters. Derived ratios are computed on read (app.services.metrics)
COUNTER_FIELDS = (
    "matches_played",
    "minutes_played",
    "goals_conceded",
    "clean_sheets",
    "saves",
    "penalties_saved",
    "penalties_faced",
    "yellow_cards",
    "red_cards",
)


class GoalkeeperStatistics(Base):
    __tablename__ = "goalkeeper_statistics"

    id = Column(Integer, primary_key=True, index=True)

    goalkeeper_id = Column(Integer, ForeignKey("goalkeepers.id"), nullable=False, index=True)

    # Opaque label: "2024" or "2024-2025". Never parsed as a date
    season = Column(String(16), nullable=False, index=True)

    matches_played = Column(Integer, nullable=False, default=0)
    minutes_played = Column(Integer, nullable=False, default=0)
    goals_conceded = Column(Integer, nullable=False, default=0)
    clean_sheets = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)
    penalties_saved = Column(Integer, nullable=False, default=0)
    penalties_faced = Column(Integer, nullable=False, default=0)
    yellow_cards = Column(Integer, nullable=False, default=0)
    red_cards = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    goalkeeper = relationship("Goalkeeper", lazy="joined")

    __table_args__ = (
        UniqueConstraint("goalkeeper_id", "season", name="uq_gk_stats_goalkeeper_season"),
        *(CheckConstraint(f"{f} >= 0", name=f"ck_gk_stats_{f}_non_negative") for f in COUNTER_FIELDS),
    )
