from pathlib import Path
from typing import Dict, Generator, List

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine, select

from kendo import settings
from kendo.models.tournament_level import LEVEL_NAMES

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

if _is_sqlite:
    db_path = settings.DATABASE_URL.replace("sqlite:///", "", 1)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine: Engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    connect_args=_connect_args,
)

# Categories referenced by the built-in rule presets (kendo.rule_presets)
DEFAULT_CATEGORIES: List[Dict] = [
    {"id": 1, "name": "Men Single", "gender": "M", "is_team": False, "age_category": 3},
    {"id": 2, "name": "Ladies Single", "gender": "F", "is_team": False, "age_category": 3},
    {"id": 3, "name": "Men Team", "gender": "M", "is_team": True, "age_category": 3},
    {"id": 4, "name": "Ladies Team", "gender": "F", "is_team": True, "age_category": 3},
    {"id": 5, "name": "Junior Men Single", "gender": "M", "is_team": False, "age_category": 2},
    {"id": 6, "name": "Junior Ladies Single", "gender": "F", "is_team": False, "age_category": 2},
    {"id": 7, "name": "Junior Team", "gender": "X", "is_team": True, "age_category": 2},
    {"id": 8, "name": "Masters Single", "gender": "M", "is_team": False, "age_category": 4},
]


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def import_models() -> None:
    """Import all models so they're registered with SQLModel metadata"""
    from kendo.models.audit_log import AuditLog  # noqa: F401
    from kendo.models.category import Category  # noqa: F401
    from kendo.models.championship import Championship  # noqa: F401
    from kendo.models.championship_settings import ChampionshipSettings  # noqa: F401
    from kendo.models.competitor import Competitor  # noqa: F401
    from kendo.models.invite import Invite  # noqa: F401
    from kendo.models.team import Team  # noqa: F401
    from kendo.models.tournament import Tournament  # noqa: F401
    from kendo.models.tournament_level import TournamentLevel  # noqa: F401
    from kendo.models.tree import Tree  # noqa: F401
    from kendo.models.user import User  # noqa: F401
    from kendo.models.venue import Venue  # noqa: F401


def seed_lookup_tables(session: Session) -> None:
    """Insert tournament levels and default categories that are missing (idempotent)"""
    from kendo.models.category import Category
    from kendo.models.tournament_level import TournamentLevel

    for level_id, name in LEVEL_NAMES.items():
        if session.get(TournamentLevel, level_id) is None:
            session.add(TournamentLevel(id=level_id, name=name))

    existing = set(session.exec(select(Category.id)).all())
    for values in DEFAULT_CATEGORIES:
        if values["id"] not in existing:
            session.add(Category(**values))
    session.commit()


def init_db(bind: Engine = engine) -> None:
    """Initialize database - create all tables and seed lookups"""
    import_models()
    SQLModel.metadata.create_all(bind)
    with Session(bind) as session:
        seed_lookup_tables(session)
