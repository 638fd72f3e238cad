from sqlmodel import SQLModel

from app.database import create_db_and_tables, engine
from app.models.user import User  # noqa: F401
from app.models.payment import Payment  # noqa: F401

SQLModel.metadata.drop_all(engine)
create_db_and_tables()

print("✅ Base de datos reseteada correctamente (tablas user y payment recreadas).")
