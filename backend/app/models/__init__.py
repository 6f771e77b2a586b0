# Import every model here so SQLAlchemy sees them before creating tables
from app.models.coach import Coach  # noqa: F401
from app.models.teams import Team  # noqa: F401
from app.models.goalkeepers import Goalkeeper  # noqa: F401
from app.models.statistics import GoalkeeperStatistics  # noqa: F401
