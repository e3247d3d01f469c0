from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from subtracker.services.parsing import format_period


class CreateSubscriptionRequest(BaseModel):
    service_name: str = Field(min_length=1)
    price: int = Field(ge=1, strict=True)
    user_id: UUID
    start_date: str
    end_date: Optional[str] = None


class UpdateSubscriptionRequest(BaseModel):
    """Partial update. ``None`` means "not supplied"; ``end_date == ""`` clears it."""

    service_name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=1, strict=True)
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class SubscriptionSummaryRequest(BaseModel):
    user_id: Optional[UUID] = None
    service_name: Optional[str] = None
    start_period: Optional[str] = None
    end_period: Optional[str] = None


class SubscriptionResponse(BaseModel):
    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: date
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("start_date", "end_date")
    def serialize_period(self, value: Optional[date]) -> Optional[str]:
        return format_period(value)


class SubscriptionSummary(BaseModel):
    total_cost: int
    count: int


class MessageResponse(BaseModel):
    message: str
