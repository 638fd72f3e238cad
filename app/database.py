from fastapi import Request
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import Settings, settings


def build_engine(settings: Settings):
    connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    return create_engine(settings.database_url, echo=settings.database_echo, connect_args=connect_args)


engine = build_engine(settings)


def create_db_and_tables(bind=None):
    from app.models.user import User  # importar los modelos
    from app.models.payment import Payment
    SQLModel.metadata.create_all(bind or engine)


# Cada app guarda su engine en app.state (ver create_app)
def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session
