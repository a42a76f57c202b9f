from typing import Optional

from sqlmodel import Field, SQLModel


class Venue(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    venue_name: str
    address: Optional[str] = None
    details: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    state: Optional[str] = None
    country_id: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
