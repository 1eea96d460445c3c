"""Car listing model."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

Number = Union[int, float]


class CarListing(BaseModel):
    """A car on sale, maintained outside this service.

    Mirrors the stored record's field set; every attribute other than the
    id may be missing on older records.
    """

    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    title: Optional[str] = None
    price: Optional[Number] = None
    fuel_type: Optional[str] = None
    car_type: Optional[str] = None
    engine_type: Optional[str] = None
    mileage: Optional[Number] = None
    transmission: Optional[str] = None
    color: Optional[str] = None
    owners: Optional[int] = None
    year: Optional[int] = None
    registration: Optional[str] = None
    status: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
