from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .const import TokenAttribute


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AuthTokens(_WireModel):
    access_token: str = Field(alias=TokenAttribute.ACCESS_TOKEN)
    refresh_token: str = Field(alias=TokenAttribute.REFRESH_TOKEN)


class UserData(_WireModel):
    """Typed payload for a Barter user."""

    id: str = Field(alias="id")
    email: Optional[str] = Field(None, alias="email")
    username: str = Field(alias="username")
    display_name: str = Field(alias="displayName")
    avatar: Optional[str] = Field(None, alias="avatar")
    bio: Optional[str] = Field(None, alias="bio")
    location: Optional[str] = Field(None, alias="location")
    rating: Optional[float] = Field(None, alias="rating")
    total_trades: Optional[int] = Field(None, alias="totalTrades")


class AuthResponse(AuthTokens):
    """Token pair returned by login/register, optionally with the user."""

    user: Optional[UserData] = Field(None, alias=TokenAttribute.USER)


class ListingOwner(_WireModel):
    id: str = Field(alias="id")
    display_name: str = Field(alias="displayName")
    username: Optional[str] = Field(None, alias="username")
    avatar: Optional[str] = Field(None, alias="avatar")
    rating: Optional[float] = Field(None, alias="rating")


class ListingData(_WireModel):
    id: str = Field(alias="id")
    title: str = Field(alias="title")
    description: str = Field("", alias="description")
    images: List[str] = Field(default_factory=list, alias="images")
    estimated_value: float = Field(0, alias="estimatedValue")
    category: Optional[str] = Field(None, alias="category")
    condition: Optional[str] = Field(None, alias="condition")
    type: Optional[str] = Field(None, alias="type")  # ITEM or SERVICE
    location: Optional[str] = Field(None, alias="location")
    distance: Optional[str] = Field(None, alias="distance")
    user_id: Optional[str] = Field(None, alias="userId")
    user: Optional[ListingOwner] = Field(None, alias="user")
    created_at: Optional[str] = Field(None, alias="createdAt")
    status: Optional[str] = Field(None, alias="status")

    @field_validator("images", mode="before")
    @classmethod
    def _ensure_list_images(cls, v):
        # coerce None or a single url into list
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class UserListingData(_WireModel):
    """Compact listing used when picking an item to trade."""

    id: str = Field(alias="id")
    title: str = Field(alias="title")
    images: List[str] = Field(default_factory=list, alias="images")
    estimated_value: float = Field(0, alias="estimatedValue")
    status: Optional[str] = Field(None, alias="status")


class OfferParty(_WireModel):
    id: str = Field(alias="id")
    display_name: str = Field(alias="displayName")
    avatar: Optional[str] = Field(None, alias="avatar")
    rating: Optional[float] = Field(None, alias="rating")


class OfferListing(_WireModel):
    id: Optional[str] = Field(None, alias="id")
    title: str = Field(alias="title")
    images: List[str] = Field(default_factory=list, alias="images")
    estimated_value: Optional[float] = Field(None, alias="estimatedValue")


class OfferData(_WireModel):
    id: str = Field(alias="id")
    status: str = Field(alias="status")
    type: Optional[str] = Field(None, alias="type")  # SENT or RECEIVED
    listing: Optional[OfferListing] = Field(None, alias="listing")
    offered_item: Optional[OfferListing] = Field(None, alias="offeredItem")
    cash_amount: Optional[float] = Field(None, alias="cashAmount")
    created_at: Optional[str] = Field(None, alias="createdAt")
    other_user: Optional[OfferParty] = Field(None, alias="otherUser")


class LastMessage(_WireModel):
    content: str = Field(alias="content")
    created_at: Optional[str] = Field(None, alias="createdAt")
    is_read: bool = Field(False, alias="isRead")


class ConversationData(_WireModel):
    id: str = Field(alias="id")
    offer_id: Optional[str] = Field(None, alias="offerId")
    other_user: Optional[OfferParty] = Field(None, alias="otherUser")
    last_message: Optional[LastMessage] = Field(None, alias="lastMessage")
    listing: Optional[OfferListing] = Field(None, alias="listing")
    status: Optional[str] = Field(None, alias="status")
