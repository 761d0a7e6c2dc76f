"""Torn API payload models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    name: str = ""
    description: str = ""
    effect: str = ""
    type: str = ""
    buy_price: int = 0
    sell_price: int = 0
    market_value: float = 0.0
    circulation: int = 0
    image: str = ""
    tradeable: bool = False

    model_config = {"extra": "ignore"}


class UserStatus(BaseModel):
    description: str = ""
    details: str = ""
    state: str = ""
    color: str = ""
    until: int = 0

    model_config = {"extra": "ignore"}


class UserInfo(BaseModel):
    level: int = 0
    gender: str = ""
    player_id: int = 0
    name: str = ""
    status: Optional[UserStatus] = None

    model_config = {"extra": "ignore"}


# Faction crimes (API v2)


class ItemRequirement(BaseModel):
    id: int
    is_reusable: bool = False
    is_available: bool = False

    model_config = {"extra": "ignore"}


class SlotUser(BaseModel):
    id: int
    joined_at: Optional[int] = None
    progress: float = 0.0

    model_config = {"extra": "ignore"}


class Slot(BaseModel):
    position: str = ""
    item_requirement: Optional[ItemRequirement] = None
    user: Optional[SlotUser] = None
    checkpoint_pass_rate: Optional[int] = None

    model_config = {"extra": "ignore"}

    @property
    def needs_item(self) -> bool:
        """An assigned member is waiting on an item that is not yet available."""
        return (
            self.item_requirement is not None
            and not self.item_requirement.is_available
            and self.user is not None
        )


class Crime(BaseModel):
    id: int
    name: str = ""
    status: str = ""
    slots: List[Slot] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class CrimesResponse(BaseModel):
    crimes: List[Crime] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class SuppliedItem(BaseModel):
    """A crime slot whose assigned member still needs an item."""

    item_id: int
    user_id: int
    crime_id: int

    model_config = ConfigDict(frozen=True)


# User log (item send, log type 4102)


class LogItem(BaseModel):
    id: int
    uid: Optional[int] = None
    qty: int = 1

    model_config = {"extra": "ignore"}


class ItemSendData(BaseModel):
    receiver: int = 0
    items: List[LogItem] = Field(default_factory=list)
    message: str = ""

    model_config = {"extra": "ignore"}


class LogEntry(BaseModel):
    log: int = 0
    title: str = ""
    timestamp: int = 0
    category: str = ""
    data: ItemSendData = Field(default_factory=ItemSendData)

    model_config = {"extra": "ignore"}


class LogResponse(BaseModel):
    log: Dict[str, LogEntry] = Field(default_factory=dict)

    model_config = {"extra": "ignore"}

    # Torn returns an empty list instead of an object when there are no entries
    @field_validator("log", mode="before")
    @classmethod
    def _coerce_empty_log(cls, v: Any) -> Any:
        if v is None or v == []:
            return {}
        return v
