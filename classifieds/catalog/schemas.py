"""
Pydantic schema definitions for the classifieds catalog.

``ItemInfo`` is one posting filed under a board. Beyond its common
fields it may carry a category payload in ``details``: exactly one of
``ForSale``, ``Housing``, ``Community`` or ``Job``, told apart by the
``kind`` tag. A listing filed with a payload must use a category name
matching it; listings without a payload accept any category text.

Older documents stored ``details`` as an object with four independent
optional keys (``for_sale``, ``community``, ``housing``, ``jobs``).
Those are still readable: the first populated key is converted to the
tagged form on load, and a category that does not match it is kept.

Integer fields mirror the widths of the stored format (``post_id`` and
``date`` are unsigned 64-bit, ``price`` unsigned 32-bit, and so on).
Nothing else about the values is checked: dates are free-form strings
and image entries are not parsed as URLs.
"""

import logging
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Annotated, Literal


U8 = Annotated[int, Field(ge=0, le=2**8 - 1)]
U32 = Annotated[int, Field(ge=0, le=2**32 - 1)]
U64 = Annotated[int, Field(ge=0, le=2**64 - 1)]


# Enum values are the persisted names. Append new cases, never rename.

class EmploymentType(str, Enum):
    FULL_TIME = "FullTime"
    PART_TIME = "PartTime"
    CONTRACT_WORK = "ContractWork"
    EMPLOYEE_CHOICE = "EmployeeChoice"


class PerTimeRange(str, Enum):
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"


class HousingType(str, Enum):
    APARTMENT = "Apartment"
    CONDO = "Condo"
    COTTAGE_OR_CABIN = "CottageOrCabin"
    DUPLEX = "Duplex"
    FLAT = "Flat"
    HOUSE = "House"
    IN_LAW = "InLaw"
    LOFT = "Loft"
    TOWN_HOUSE = "TownHouse"
    MANUFACTURED = "Manufactured"
    ASSISTED_LIVING = "AssistedLiving"
    LAND = "Land"


class Condition(str, Enum):
    NEW = "New"
    LIKE_NEW = "LikeNew"
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    SALVAGE = "Salvage"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Category payloads

class Job(_Record):
    kind: Literal["jobs"] = "jobs"
    employment_type: Optional[EmploymentType] = None
    job_title: Optional[str] = None
    compensation: Optional[U64] = None
    company_name: Optional[str] = None


class Housing(_Record):
    kind: Literal["housing"] = "housing"
    rent: Optional[U64] = None
    per_time_range: Optional[PerTimeRange] = None
    sqft: Optional[U64] = None
    pet: Optional[bool] = None
    air_conditioning: Optional[bool] = None
    private_room: Optional[bool] = None
    housing_type: Optional[HousingType] = None
    laundry: Optional[bool] = None
    parking: Optional[bool] = None
    available_date: Optional[str] = None
    open_house_dates: Optional[List[str]] = None


class ForSale(_Record):
    kind: Literal["for_sale"] = "for_sale"
    make_or_manufacturer: Optional[str] = None
    model_name_or_number: Optional[str] = None
    size_dimensions: Optional[str] = None
    condition: Optional[Condition] = None


class GarageOrMovingSales(_Record):
    garage_sale_start_time: Optional[str] = None
    garage_sale_dates: Optional[List[str]] = None


class ClassesOrEvents(_Record):
    event_venue: Optional[str] = None
    event_start_date: Optional[str] = None
    event_duration: Optional[U8] = None
    event_features: Optional[List[str]] = None


class Community(_Record):
    kind: Literal["community"] = "community"
    garage_sale: Optional[GarageOrMovingSales] = None
    class_or_event: Optional[ClassesOrEvents] = None
    lost_or_found: Optional[bool] = None
    rideshare: Optional[bool] = None


Details = Annotated[
    Union[ForSale, Housing, Community, Job],
    Field(discriminator="kind"),
]

# Order matches the key order of the old four-optionals layout.
LEGACY_DETAIL_KEYS = ("for_sale", "community", "housing", "jobs")

# Category names accepted for each payload kind, after normalisation.
CATEGORY_ALIASES = {
    "for_sale": {"for_sale", "forsale", "sale"},
    "housing": {"housing"},
    "community": {"community"},
    "jobs": {"jobs", "job"},
}

logger = logging.getLogger(__name__)


def normalize_category(category: str) -> str:
    """Normalize a category name for comparison.

    Parameters
    ----------
    category : str
        Free-text category as supplied by the caller.

    Returns
    -------
    str
        The name stripped, lowercased, with ``-`` and spaces mapped to
        ``_`` (``"For-Sale"`` becomes ``"for_sale"``).
    """
    return category.strip().lower().replace("-", "_").replace(" ", "_")


def category_matches(category: str, kind: str) -> bool:
    """Return True when ``category`` names the payload ``kind``."""
    aliases = CATEGORY_ALIASES.get(kind, {kind})
    return normalize_category(category) in aliases


def _upgrade_legacy_details(details: dict) -> Optional[dict]:
    populated = [key for key in LEGACY_DETAIL_KEYS if details.get(key) is not None]
    if not populated:
        return None
    key = populated[0]
    if len(populated) > 1:
        # The old layout never prevented this; keep the first payload.
        logger.warning(
            "details hold several category payloads (%s), keeping %r",
            ", ".join(populated), key,
        )
    payload = details[key]
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    if not isinstance(payload, dict):
        raise ValueError(
            f"details.{key} must be an object, got {type(payload).__name__}"
        )
    return {**payload, "kind": key}


# ---------------------------------------------------------------------------
# Listing

class ItemInfo(_Record):
    """A single listing stored on a board.

    ``creator`` is whatever the caller put there; it is not compared
    against the caller identity anywhere, including on delete.
    ``post_id`` is not required to be unique within or across boards.

    Reading never checks ``category`` against ``details``, so listings
    stored before that rule existed still load. The catalog applies
    the rule when a listing is filed (see ``category_matches_details``).
    """

    creator: str
    post_id: U64
    date: U64
    category: str
    title: str
    description: str
    image: Optional[List[str]] = None
    location: Optional[str] = None
    price: Optional[U32] = None
    details: Optional[Details] = None

    @model_validator(mode="before")
    @classmethod
    def _read_legacy_details(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        details = data.get("details")
        if (
            isinstance(details, dict)
            and "kind" not in details
            and set(details) <= set(LEGACY_DETAIL_KEYS)
        ):
            data = dict(data)
            data["details"] = _upgrade_legacy_details(details)
        return data

    @property
    def category_matches_details(self) -> bool:
        return self.details is None or category_matches(self.category, self.details.kind)
