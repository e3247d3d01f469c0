"""Request orchestration for subscriptions.

Policy: ``created_at``/``updated_at`` are tracked, listing is ordered newest
first (``created_at DESC, id DESC``), and a summary without period tokens covers
all time. An end period earlier than the start period yields an empty summary.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID, uuid4

from subtracker.models.subscription import Subscription, utcnow
from subtracker.schemas.subscription import (
    CreateSubscriptionRequest,
    SubscriptionSummary,
    SubscriptionSummaryRequest,
    UpdateSubscriptionRequest,
)
from subtracker.services.parsing import parse_period
from subtracker.services.query_builder import SummaryFilter, build_summary_predicates, build_update_fields
from subtracker.services.subscription_repo import SubscriptionRepository

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


def normalize_pagination(limit: int | None, offset: int | None) -> tuple[int, int]:
    if limit is None or limit <= 0 or limit > MAX_LIMIT:
        limit = DEFAULT_LIMIT
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


class SubscriptionService:
    def __init__(
        self,
        repo: SubscriptionRepository,
        log: logging.Logger | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.repo = repo
        self.log = log or logger
        self.clock = clock

    def create_subscription(self, req: CreateSubscriptionRequest) -> Subscription:
        start_date = parse_period(req.start_date, "start_date")
        end_date = parse_period(req.end_date, "end_date") if req.end_date is not None else None

        now = self.clock()
        subscription = Subscription(
            id=uuid4(),
            service_name=req.service_name,
            price=req.price,
            user_id=req.user_id,
            start_date=start_date,
            end_date=end_date,
            created_at=now,
            updated_at=now,
        )
        return self.repo.create(subscription)

    def get_subscription(self, subscription_id: UUID) -> Subscription:
        return self.repo.get_by_id(subscription_id)

    def update_subscription(self, subscription_id: UUID, req: UpdateSubscriptionRequest) -> None:
        fields = build_update_fields(req, now=self.clock())
        self.repo.update(subscription_id, fields)

    def delete_subscription(self, subscription_id: UUID) -> None:
        self.repo.delete(subscription_id)

    def list_subscriptions(self, limit: int | None, offset: int | None) -> list[Subscription]:
        limit, offset = normalize_pagination(limit, offset)
        return self.repo.list(limit, offset)

    def get_subscription_summary(self, req: SubscriptionSummaryRequest) -> SubscriptionSummary:
        flt = SummaryFilter.from_request(req)
        if flt.is_empty_range:
            self.log.info(
                "subscriptions.summary.empty_range start_period=%s end_period=%s",
                req.start_period,
                req.end_period,
            )
            return SubscriptionSummary(total_cost=0, count=0)

        total_cost, count = self.repo.get_summary(build_summary_predicates(flt))
        return SubscriptionSummary(total_cost=total_cost, count=count)
