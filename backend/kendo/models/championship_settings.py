from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship

from kendo.models.soft_delete import SoftDeleteMixin

if TYPE_CHECKING:
    from kendo.models.championship import Championship


class ChampionshipSettings(SoftDeleteMixin, table=True):
    """Competition rules of a championship; rule presets create these rows"""

    __tablename__ = "championship_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", index=True)
    alias: Optional[str] = None

    fighting_areas: int = Field(default=1)
    fight_duration: Optional[str] = None  # "mm:ss"
    has_preliminary: bool = Field(default=True)
    preliminary_group_size: int = Field(default=3)
    preliminary_winner: int = Field(default=1)
    preliminary_duration: Optional[str] = None
    tree_type: int = Field(default=1)  # 0 = round robin, 1 = direct elimination

    has_encho: bool = Field(default=True)
    encho_qty: int = Field(default=0)  # 0 = unlimited
    encho_duration: Optional[str] = None
    has_hantei: bool = Field(default=False)

    cost: Optional[int] = None
    team_size: Optional[int] = None
    team_reserve: Optional[int] = None
    limit_by_entity: Optional[int] = None

    # Relationship
    championship: Optional["Championship"] = Relationship(back_populates="settings")
