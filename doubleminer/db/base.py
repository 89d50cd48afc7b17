from sqlmodel import SQLModel, create_engine
from sqlalchemy.pool import StaticPool
import os


def make_engine(dsn: str):
    if dsn.startswith("sqlite"):
        if dsn in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection so every session sees the same in-memory db
            return create_engine(dsn, echo=False, connect_args={"check_same_thread": False}, poolclass=StaticPool)
        folder = os.path.dirname(dsn.split(":///", 1)[-1])
        if folder:
            os.makedirs(folder, exist_ok=True)
        return create_engine(dsn, echo=False, connect_args={"check_same_thread": False})
    return create_engine(dsn, echo=False)


def init_db(engine):
    # register tables on the metadata
    from doubleminer.db import models  # noqa: F401
    SQLModel.metadata.create_all(engine)
