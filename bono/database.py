from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from bono.core.config import settings

# Only used when RECORD_STORE=sql; the sheet backend never opens a session.
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_engine(DATABASE_URL)
else:
    # The bonos.db file is shared by uvicorn worker threads
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """
    One session per request for SqlRecordStore.
    The store commits each insert/update/delete itself, so this only closes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """Create the bonus_records table if it does not exist yet."""
    from bono.models import bonus_record  # noqa: F401
    Base.metadata.create_all(bind=engine)
