from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from subtracker.core.database import get_db
from subtracker.schemas.subscription import (
    CreateSubscriptionRequest,
    MessageResponse,
    SubscriptionResponse,
    SubscriptionSummary,
    SubscriptionSummaryRequest,
    UpdateSubscriptionRequest,
)
from subtracker.services.parsing import parse_uuid
from subtracker.services.subscription_repo import SubscriptionRepository
from subtracker.services.subscription_service import SubscriptionService

router = APIRouter()


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(SubscriptionRepository(db))


def _optional(raw: str | None) -> str | None:
    # Empty query values count as absent
    if raw is None or raw == "":
        return None
    return raw


def _lenient_int(raw: str | None) -> int | None:
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None


# Declared before /subscriptions/{subscription_id} so "summary" is not taken as an id
@router.get("/subscriptions/summary", response_model=SubscriptionSummary)
def get_subscription_summary(
    user_id: str | None = None,
    service_name: str | None = None,
    start_period: str | None = None,
    end_period: str | None = None,
    service: SubscriptionService = Depends(get_subscription_service),
):
    user_id = _optional(user_id)
    req = SubscriptionSummaryRequest(
        user_id=parse_uuid(user_id, "user ID") if user_id is not None else None,
        service_name=_optional(service_name),
        start_period=_optional(start_period),
        end_period=_optional(end_period),
    )
    return service.get_subscription_summary(req)


@router.post("/subscriptions", response_model=SubscriptionResponse, status_code=201)
def create_subscription(
    body: CreateSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.create_subscription(body)


@router.get("/subscriptions", response_model=List[SubscriptionResponse])
def list_subscriptions(
    limit: str | None = None,
    offset: str | None = None,
    service: SubscriptionService = Depends(get_subscription_service),
):
    # Malformed pagination values fall back to defaults instead of failing
    return service.list_subscriptions(_lenient_int(limit), _lenient_int(offset))


@router.get("/subscriptions/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.get_subscription(parse_uuid(subscription_id))


@router.put("/subscriptions/{subscription_id}", response_model=MessageResponse)
def update_subscription(
    subscription_id: str,
    body: UpdateSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    service.update_subscription(parse_uuid(subscription_id), body)
    return MessageResponse(message="subscription updated successfully")


@router.delete("/subscriptions/{subscription_id}", response_model=MessageResponse)
def delete_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
):
    service.delete_subscription(parse_uuid(subscription_id))
    return MessageResponse(message="subscription deleted successfully")
