from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship

from kendo.models.soft_delete import SoftDeleteMixin

if TYPE_CHECKING:
    from kendo.models.category import Category
    from kendo.models.championship_settings import ChampionshipSettings
    from kendo.models.tournament import Tournament


class Championship(SoftDeleteMixin, table=True):
    """One category played inside a tournament (also the tournament<->category pivot)"""

    __table_args__ = (SAUniqueConstraint("tournament_id", "category_id", name="uq_tournament_category"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    category_id: int = Field(foreign_key="category.id", index=True)

    # Relationships
    tournament: Optional["Tournament"] = Relationship()
    category: Optional["Category"] = Relationship()
    settings: List["ChampionshipSettings"] = Relationship(back_populates="championship")
