from datetime import date
from typing import TYPE_CHECKING, List, Optional, Sequence

from sqlmodel import Field, Relationship

from kendo.models.soft_delete import SoftDeleteMixin
from kendo.models.tournament_level import (
    LEVEL_DISTRICTAL,
    LEVEL_ESTATE,
    LEVEL_INTERNATIONAL,
    LEVEL_LOCAL,
    LEVEL_MUNICIPAL,
    LEVEL_NATIONAL,
    LEVEL_NONE,
    LEVEL_REGIONAL,
)

if TYPE_CHECKING:
    from kendo.models.category import Category
    from kendo.models.tournament_level import TournamentLevel
    from kendo.models.user import User
    from kendo.models.venue import Venue

# Tournament.type codes
TYPE_INVITATION = 0
TYPE_OPEN = 1


class Tournament(SoftDeleteMixin, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # Route key; generated once from name, see kendo.utils.slugs
    slug: str = Field(index=True, unique=True)
    name: str
    date_ini: Optional[date] = None
    date_fin: Optional[date] = None
    register_date_limit: Optional[date] = None
    sport: str = Field(default="Kendo")
    promoter: Optional[str] = None
    host_organization: Optional[str] = None
    technical_assistance: Optional[str] = None
    category: Optional[str] = None  # legacy, unused
    rule_id: int = Field(default=0)
    type: int = Field(default=TYPE_OPEN)
    venue_id: Optional[int] = Field(default=None, foreign_key="venue.id")
    level_id: int = Field(default=LEVEL_NONE, foreign_key="tournament_level.id")
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)

    # Relationships
    owner: Optional["User"] = Relationship()
    level: Optional["TournamentLevel"] = Relationship()
    venue: Optional["Venue"] = Relationship()

    def get_category_list(self, categories: Sequence["Category"]) -> List[int]:
        """Ids of the already loaded categories, in load order"""
        return [category.id for category in categories]

    def is_open(self) -> bool:
        return self.type == TYPE_OPEN

    def needs_invitation(self) -> bool:
        return self.type == TYPE_INVITATION

    def is_international(self) -> bool:
        return self.level_id == LEVEL_INTERNATIONAL

    def is_national(self) -> bool:
        return self.level_id == LEVEL_NATIONAL

    def is_regional(self) -> bool:
        return self.level_id == LEVEL_REGIONAL

    def is_estate(self) -> bool:
        return self.level_id == LEVEL_ESTATE

    def is_municipal(self) -> bool:
        return self.level_id == LEVEL_MUNICIPAL

    def is_districtal(self) -> bool:
        return self.level_id == LEVEL_DISTRICTAL

    def is_local(self) -> bool:
        return self.level_id == LEVEL_LOCAL

    def has_no_level(self) -> bool:
        return self.level_id == LEVEL_NONE
