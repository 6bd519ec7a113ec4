"""
Database layer using SQLAlchemy
"""
from sqlalchemy import create_engine, Column, Integer, String, Boolean, Text, ForeignKey
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from dlt_ai.config import DB_URL, logger

Base = declarative_base()


class Draw(Base):
    __tablename__ = 'draws'

    # Autoincrement id is the chronological order of the history
    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_number = Column(String, nullable=False, default="")
    draw_date = Column(String, nullable=False, default="")
    f1 = Column(Integer, nullable=False)
    f2 = Column(Integer, nullable=False)
    f3 = Column(Integer, nullable=False)
    f4 = Column(Integer, nullable=False)
    f5 = Column(Integer, nullable=False)
    b1 = Column(Integer, nullable=False)
    b2 = Column(Integer, nullable=False)
    blocked = Column(Boolean, nullable=False, default=False)

    def get_front(self):
        return [self.f1, self.f2, self.f3, self.f4, self.f5]

    def get_back(self):
        return [self.b1, self.b2]


class GenerationRecord(Base):
    __tablename__ = 'generation_records'

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(String, nullable=False)
    display_text = Column(Text, nullable=False)


class ConfirmedNumbers(Base):
    __tablename__ = 'confirmed_numbers'

    id = Column(Integer, primary_key=True)
    confirmed_at = Column(String, nullable=False)
    display_text = Column(Text, nullable=False)


class GroupScore(Base):
    __tablename__ = 'group_scores'

    group_num = Column(Integer, primary_key=True)
    score = Column(Integer, nullable=False, default=0)
    max_prize = Column(Integer)  # best tier hit so far, smaller is better
    max_prize_count = Column(Integer, nullable=False, default=0)


class PrizeRecord(Base):
    __tablename__ = 'prize_records'

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_num = Column(Integer, ForeignKey('group_scores.group_num'), nullable=False)
    issue_number = Column(String, nullable=False, default="")
    prize_level = Column(Integer, nullable=False)
    recorded_at = Column(String, nullable=False)


class BlockedGroup(Base):
    __tablename__ = 'blocked_groups'

    group_num = Column(Integer, primary_key=True)


def _make_engine(url):
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(url, echo=False, poolclass=StaticPool,
                             connect_args={"check_same_thread": False})
    return create_engine(url, echo=False)


# Database engine and session
engine = _make_engine(DB_URL)
SessionLocal = sessionmaker(bind=engine)


def configure_database(url):
    """Point every session at another database (tests use sqlite:///:memory:)"""
    global engine
    engine.dispose()
    engine = _make_engine(url)
    SessionLocal.configure(bind=engine)
    init_db()
    logger.info(f"Database switched to {url}")
    return engine


def init_db():
    """Initialize database tables"""
    try:
        Base.metadata.create_all(engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def get_session():
    """Get database session"""
    return SessionLocal()
