from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from subtracker.core.errors import SubscriptionError
from subtracker.models.subscription import Subscription
from subtracker.services.query_builder import FieldSet

logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Storage access for the ``subscriptions`` table.

    Every method runs a single statement in its own transaction: it commits on
    success and rolls back before raising a SubscriptionError.
    """

    def __init__(self, db: Session, log: logging.Logger | None = None) -> None:
        self.db = db
        self.log = log or logger

    def create(self, subscription: Subscription) -> Subscription:
        try:
            self.db.add(subscription)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            self.log.error("subscriptions.create.conflict id=%s error=%s", subscription.id, exc)
            raise SubscriptionError.conflict_or_io("failed to create subscription") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.log.error("subscriptions.create.error id=%s error=%s", subscription.id, exc)
            raise SubscriptionError.conflict_or_io("failed to create subscription") from exc

        self.db.refresh(subscription)
        self.log.info("subscriptions.create.ok id=%s", subscription.id)
        return subscription

    def get_by_id(self, subscription_id: UUID) -> Subscription:
        try:
            subscription = self.db.query(Subscription).filter(Subscription.id == subscription_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.log.error("subscriptions.get.error id=%s error=%s", subscription_id, exc)
            raise SubscriptionError.io_error("failed to get subscription") from exc

        if subscription is None:
            raise SubscriptionError.not_found()
        return subscription

    def update(self, subscription_id: UUID, fields: FieldSet) -> None:
        try:
            affected = (
                self.db.query(Subscription)
                .filter(Subscription.id == subscription_id)
                .update(fields.as_dict(), synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.log.error("subscriptions.update.error id=%s error=%s", subscription_id, exc)
            raise SubscriptionError.io_error("failed to update subscription") from exc

        if not affected:
            raise SubscriptionError.not_found()
        self.log.info("subscriptions.update.ok id=%s columns=%s", subscription_id, ",".join(fields.columns()))

    def delete(self, subscription_id: UUID) -> None:
        try:
            affected = (
                self.db.query(Subscription)
                .filter(Subscription.id == subscription_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.log.error("subscriptions.delete.error id=%s error=%s", subscription_id, exc)
            raise SubscriptionError.io_error("failed to delete subscription") from exc

        if not affected:
            raise SubscriptionError.not_found()
        self.log.info("subscriptions.delete.ok id=%s", subscription_id)

    def list(self, limit: int, offset: int) -> list[Subscription]:
        try:
            rows = (
                self.db.query(Subscription)
                .order_by(Subscription.created_at.desc(), Subscription.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.log.error("subscriptions.list.error limit=%s offset=%s error=%s", limit, offset, exc)
            raise SubscriptionError.io_error("failed to list subscriptions") from exc

        self.log.info("subscriptions.list.ok count=%s limit=%s offset=%s", len(rows), limit, offset)
        return rows

    def get_summary(self, predicates: list[ColumnElement]) -> tuple[int, int]:
        try:
            total, count = (
                self.db.query(func.coalesce(func.sum(Subscription.price), 0), func.count(Subscription.id))
                .filter(*predicates)
                .one()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.log.error("subscriptions.summary.error error=%s", exc)
            raise SubscriptionError.io_error("failed to get subscription summary") from exc

        total_cost = int(total or 0)
        count = int(count or 0)
        self.log.info("subscriptions.summary.ok total_cost=%s count=%s", total_cost, count)
        return total_cost, count
