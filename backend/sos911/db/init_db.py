from sqlalchemy.engine import Engine

from sos911.db.base import Base
from sos911.db.session import engine as default_engine

# IMPORTANT: import models so they register with Base.metadata
import sos911.db.models  # noqa: F401


def init_db(engine: Engine | None = None) -> None:
    Base.metadata.create_all(bind=engine or default_engine)
