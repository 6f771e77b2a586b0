from app.db.session import engine
from app.db.base import Base

# Importing the package registers every model on Base.metadata
import app.models  # noqa: F401


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)
