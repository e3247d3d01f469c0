from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from subtracker.core.database import Base
from subtracker.models.subscription import Subscription
from subtracker.schemas.subscription import CreateSubscriptionRequest, SubscriptionSummaryRequest
from subtracker.services.subscription_repo import SubscriptionRepository
from subtracker.services.subscription_service import SubscriptionService


def main() -> None:
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        service = SubscriptionService(SubscriptionRepository(db))
        user_id = uuid4()
        for name, price, start, end in [
            ("Yandex Plus", 400, "07-2023", None),
            ("Netflix", 1000, "01-2024", "03-2024"),
            ("Spotify", 300, "04-2024", None),
        ]:
            service.create_subscription(
                CreateSubscriptionRequest(service_name=name, price=price, user_id=user_id, start_date=start, end_date=end)
            )

        summary = service.get_subscription_summary(
            SubscriptionSummaryRequest(start_period="01-2024", end_period="02-2024")
        )
        assert (summary.total_cost, summary.count) == (1400, 2), summary

        summary = service.get_subscription_summary(
            SubscriptionSummaryRequest(service_name="Spotify", start_period="01-2024", end_period="12-2024")
        )
        assert (summary.total_cost, summary.count) == (300, 1), summary

        summary = service.get_subscription_summary(
            SubscriptionSummaryRequest(start_period="01-2024", end_period="12-2023")
        )
        assert (summary.total_cost, summary.count) == (0, 0), summary

        summary = service.get_subscription_summary(SubscriptionSummaryRequest(user_id=user_id))
        assert summary.count == db.query(Subscription).count(), summary
    finally:
        db.close()


if __name__ == "__main__":
    main()
    print("OK")
