import unittest
from datetime import date, datetime, timezone
from uuid import uuid4

from subtracker.core.errors import ErrorKind, SubscriptionError
from subtracker.schemas.subscription import SubscriptionSummaryRequest, UpdateSubscriptionRequest
from subtracker.services.query_builder import (
    FieldSet,
    SummaryFilter,
    build_summary_predicates,
    build_update_fields,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestBuildUpdateFields(unittest.TestCase):
    def test_only_price(self):
        fields = build_update_fields(UpdateSubscriptionRequest(price=700), now=NOW)
        self.assertEqual(fields.as_dict(), {"price": 700, "updated_at": NOW})

    def test_empty_end_date_clears(self):
        fields = build_update_fields(UpdateSubscriptionRequest(end_date=""), now=NOW)
        self.assertIn("end_date", fields)
        self.assertIsNone(fields.as_dict()["end_date"])

    def test_missing_end_date_untouched(self):
        fields = build_update_fields(UpdateSubscriptionRequest(service_name="Netflix"), now=NOW)
        self.assertNotIn("end_date", fields)
        self.assertEqual(fields.columns(), ["service_name", "updated_at"])

    def test_dates_parsed(self):
        fields = build_update_fields(UpdateSubscriptionRequest(start_date="02-2024", end_date="06-2024"), now=NOW)
        values = fields.as_dict()
        self.assertEqual(values["start_date"], date(2024, 2, 1))
        self.assertEqual(values["end_date"], date(2024, 6, 1))

    def test_invalid_date_fails_before_anything_is_built(self):
        for req in [
            UpdateSubscriptionRequest(price=10, start_date="2024-02"),
            UpdateSubscriptionRequest(price=10, end_date="13-2024"),
            UpdateSubscriptionRequest(start_date=""),
        ]:
            with self.subTest(req=req):
                with self.assertRaises(SubscriptionError) as ctx:
                    build_update_fields(req, now=NOW)
                self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_INPUT)

    def test_field_set_rejects_duplicate_column(self):
        fields = FieldSet().set("price", 1)
        with self.assertRaises(ValueError):
            fields.set("price", 2)


class TestSummaryFilter(unittest.TestCase):
    def test_periods_normalized(self):
        flt = SummaryFilter.from_request(SubscriptionSummaryRequest(start_period="01-2024", end_period="02-2024"))
        self.assertEqual(flt.period_start, date(2024, 1, 1))
        self.assertEqual(flt.period_end, date(2024, 2, 29))
        self.assertFalse(flt.is_empty_range)

    def test_inverted_range_is_empty(self):
        flt = SummaryFilter.from_request(SubscriptionSummaryRequest(start_period="01-2024", end_period="12-2023"))
        self.assertTrue(flt.is_empty_range)

    def test_same_month_is_not_empty(self):
        flt = SummaryFilter.from_request(SubscriptionSummaryRequest(start_period="03-2024", end_period="03-2024"))
        self.assertFalse(flt.is_empty_range)

    def test_missing_periods_apply_no_bound(self):
        flt = SummaryFilter.from_request(SubscriptionSummaryRequest())
        self.assertEqual(build_summary_predicates(flt), [])

    def test_predicate_count(self):
        flt = SummaryFilter.from_request(
            SubscriptionSummaryRequest(
                user_id=uuid4(),
                service_name="Yandex Plus",
                start_period="01-2024",
                end_period="02-2024",
            )
        )
        self.assertEqual(len(build_summary_predicates(flt)), 4)

        only_start = SummaryFilter.from_request(SubscriptionSummaryRequest(start_period="01-2024"))
        self.assertEqual(len(build_summary_predicates(only_start)), 1)

    def test_malformed_period(self):
        with self.assertRaises(SubscriptionError) as ctx:
            SummaryFilter.from_request(SubscriptionSummaryRequest(start_period="2024-01", end_period="02-2024"))
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_INPUT)
        self.assertIn("start_period", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
