from typing import Optional

from sqlmodel import Field

from kendo.models.soft_delete import SoftDeleteMixin


class Competitor(SoftDeleteMixin, table=True):
    """A user registered in a championship"""

    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    confirmed: bool = Field(default=False)
    short_id: Optional[int] = None
