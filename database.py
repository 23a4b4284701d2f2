import os
from datetime import datetime
from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Default to a local SQLite file; any SQLAlchemy URL works.
DB_URL = os.getenv("DATABASE_URL", "sqlite:///spending_tracker.db")


def make_engine(url: str = DB_URL):
    return create_engine(url, connect_args={"check_same_thread": False} if url.startswith("sqlite") else {})


engine = make_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# --- Models ---

class Slot(Base):
    """One named key-value entry (the browser local-storage equivalent)."""

    __tablename__ = "slots"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

# --- Init DB ---
def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)
