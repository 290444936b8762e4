from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlmodel import create_engine, SQLModel, Session
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _database_url() -> str:
    """Use DATABASE_URL, or assemble a MySQL URL from the DB_* variables."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = os.getenv("DB_HOST")
    if not host:
        raise ValueError("DATABASE_URL or DB_HOST environment variable must be set")

    return URL.create(
        "mysql+pymysql",
        username=os.getenv("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD") or None,
        host=host,
        port=int(os.getenv("DB_PORT", "3306")),
        database=os.getenv("DB_NAME", "tasks"),
    ).render_as_string(hide_password=False)


def build_engine(url: str, **kwargs):
    """Create an engine; pooled backends get a bounded, pre-pinged pool."""
    options = {"echo": os.getenv("DB_ECHO", "false").lower() == "true"}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "5")),
            pool_pre_ping=True,
        )
    options.update(kwargs)
    new_engine = create_engine(url, **options)

    if new_engine.dialect.name == "sqlite":
        # ON DELETE CASCADE is only honoured with foreign keys switched on
        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


DATABASE_URL = _database_url()

# Create engine
engine = build_engine(DATABASE_URL)


def create_db_and_tables():
    """Create all tables in the database"""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Get database session - used as FastAPI dependency"""
    with Session(engine) as session:
        yield session


def session_factory() -> Session:
    """Open a standalone session on the shared engine (used outside requests)."""
    return Session(engine)
