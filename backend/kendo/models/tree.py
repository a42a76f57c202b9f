from typing import Optional

from sqlmodel import Field, SQLModel


class Tree(SQLModel, table=True):
    """A fight slot of a championship bracket (c1/c2 are competitor or team ids)"""

    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", index=True)
    area: int = Field(default=1)
    round_number: int = Field(default=1)
    order_index: int = Field(default=1)
    c1: Optional[int] = None
    c2: Optional[int] = None
    winner_id: Optional[int] = None
