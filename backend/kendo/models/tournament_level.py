from typing import Dict, Optional

from sqlmodel import Field, SQLModel

LEVEL_NONE = 1
LEVEL_LOCAL = 2
LEVEL_DISTRICTAL = 3
LEVEL_MUNICIPAL = 4
LEVEL_ESTATE = 5
LEVEL_REGIONAL = 6
LEVEL_NATIONAL = 7
LEVEL_INTERNATIONAL = 8

# Seeded into tournament_level by init_db
LEVEL_NAMES: Dict[int, str] = {
    LEVEL_NONE: "N/A",
    LEVEL_LOCAL: "Local",
    LEVEL_DISTRICTAL: "Districtal",
    LEVEL_MUNICIPAL: "Municipal",
    LEVEL_ESTATE: "Estate",
    LEVEL_REGIONAL: "Regional",
    LEVEL_NATIONAL: "National",
    LEVEL_INTERNATIONAL: "International",
}


class TournamentLevel(SQLModel, table=True):
    __tablename__ = "tournament_level"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
