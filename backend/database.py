# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings

# 1. Supabase Postgres in production, SQLite locally
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# 2. SQLAlchemy only accepts the postgresql:// scheme
if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

# 3. Driver options
if "sqlite" in SQLALCHEMY_DATABASE_URL:
    connect_args = {"check_same_thread": False}
else:
    # Postgres aborts any statement running past the upstream deadline
    timeout_ms = int(settings.UPSTREAM_TIMEOUT * 1000)
    connect_args = {
        "connect_timeout": max(1, int(settings.UPSTREAM_TIMEOUT)),
        "options": f"-c statement_timeout={timeout_ms}",
    }

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Register the tables on Base before creating them
    import models.category  # noqa: F401
    import models.product  # noqa: F401
    import models.wishlist  # noqa: F401
    import models.review  # noqa: F401
    Base.metadata.create_all(bind=engine)
