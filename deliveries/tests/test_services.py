from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from deliveries import services
from deliveries.exceptions import DeliveryConflict, TransitionNotAllowed
from deliveries.models import DeliveryRequest
from .helpers import actor_for, assign, make_delivery, make_user

Status = DeliveryRequest.Status
Confirmation = DeliveryRequest.ShopConfirmation


def create_payload(**overrides):
    data = {
        "item_description": "Rice 5kg",
        "contact_number": "9800000001",
        "village": "Rampur",
        "shop_name": "Village General Store",
        "shop_address": "Main Road 12, Rampur",
        "shop_id": "shop1",
    }
    data.update(overrides)
    return data


class OwnershipConsistencyMixin:
    def assertOwnershipConsistent(self, delivery):
        delivery.refresh_from_db()
        self.assertEqual(
            delivery.assigned_driver_id is None,
            delivery.delivery_status == Status.PENDING,
            f"driver={delivery.assigned_driver_id} status={delivery.delivery_status}",
        )


class CreateDeliveryTests(TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.driver, _ = make_user("drv", "driver")

    def test_create_with_distance_prices_and_starts_pending(self):
        delivery = services.create_delivery(
            actor_for(self.cust), create_payload(estimated_distance_km=5)
        )
        self.assertEqual(delivery.price, Decimal("5.00"))
        self.assertEqual(delivery.delivery_status, Status.PENDING)
        self.assertEqual(delivery.shop_confirmation_status, Confirmation.PENDING)
        self.assertIsNone(delivery.assigned_driver_id)
        self.assertIsNone(delivery.shop_confirmation_at)
        self.assertEqual(delivery.created_by_id, self.cust.id)

    def test_create_without_distance_uses_default_price(self):
        delivery = services.create_delivery(actor_for(self.cust), create_payload())
        self.assertEqual(delivery.price, Decimal("4.00"))
        self.assertIsNone(delivery.estimated_distance_km)

    def test_only_customers_create(self):
        with self.assertRaises(PermissionDenied):
            services.create_delivery(actor_for(self.driver), create_payload())

    def test_blank_required_text_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            services.create_delivery(
                actor_for(self.cust), create_payload(village="   ", shop_address="")
            )
        self.assertIn("village", ctx.exception.detail)
        self.assertIn("shop_address", ctx.exception.detail)
        self.assertFalse(DeliveryRequest.objects.exists())

    def test_invalid_need_by_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            services.create_delivery(actor_for(self.cust), create_payload(need_by_at="tomorrow-ish"))
        self.assertIn("need_by_at", ctx.exception.detail)

    def test_need_by_accepts_dates_and_datetimes(self):
        d1 = services.create_delivery(actor_for(self.cust), create_payload(need_by_at="2030-05-01"))
        self.assertEqual(d1.need_by_at.date().isoformat(), "2030-05-01")
        self.assertTrue(timezone.is_aware(d1.need_by_at))

        d2 = services.create_delivery(
            actor_for(self.cust), create_payload(need_by_at=datetime(2030, 5, 1, 14, 30))
        )
        self.assertTrue(timezone.is_aware(d2.need_by_at))

    def test_optional_numbers_and_basket_are_normalized(self):
        delivery = services.create_delivery(
            actor_for(self.cust),
            create_payload(
                estimated_distance_km="abc",
                product_total=float("nan"),
                delivery_fee="2.5",
                grand_total=None,
                items=[{"id": "p1", "name": "Rice"}, {"id": "p2", "name": "Oil", "qty": 2, "price": 3.1}],
            ),
        )
        self.assertIsNone(delivery.estimated_distance_km)
        self.assertEqual(delivery.price, Decimal("4.00"))
        self.assertIsNone(delivery.product_total)
        self.assertEqual(delivery.delivery_fee, 2.5)
        self.assertIsNone(delivery.grand_total)
        self.assertEqual(delivery.items[0], {"id": "p1", "name": "Rice", "qty": 0, "price": 0})
        self.assertEqual(delivery.items[1]["qty"], 2.0)

    def test_distance_beyond_limit_rejected(self):
        for distance in (1001, 1e9, 1e30):
            with self.subTest(distance=distance):
                with self.assertRaises(ValidationError) as ctx:
                    services.create_delivery(
                        actor_for(self.cust), create_payload(estimated_distance_km=distance)
                    )
                self.assertIn("estimated_distance_km", ctx.exception.detail)
        self.assertFalse(DeliveryRequest.objects.exists())

    def test_distance_at_limit_accepted(self):
        delivery = services.create_delivery(
            actor_for(self.cust), create_payload(estimated_distance_km=1000)
        )
        self.assertEqual(delivery.price, Decimal("602.00"))

    def test_need_by_accepts_epoch_milliseconds(self):
        delivery = services.create_delivery(
            actor_for(self.cust), create_payload(need_by_at=1767225600000)
        )
        self.assertEqual(delivery.need_by_at, datetime(2026, 1, 1, tzinfo=dt_timezone.utc))

    def test_need_by_rejects_out_of_range_epoch(self):
        with self.assertRaises(ValidationError) as ctx:
            services.create_delivery(actor_for(self.cust), create_payload(need_by_at=1e30))
        self.assertIn("need_by_at", ctx.exception.detail)

    def test_blank_shop_id_stored_as_null(self):
        delivery = services.create_delivery(actor_for(self.cust), create_payload(shop_id="  "))
        self.assertIsNone(delivery.shop_id)


class ClaimDeliveryTests(OwnershipConsistencyMixin, TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.drivers = [make_user(f"driver{i}", "driver")[0] for i in range(4)]
        self.delivery = make_delivery(self.cust)

    def test_exactly_one_claim_wins(self):
        winner, *others = self.drivers
        claimed = services.claim_delivery(actor_for(winner), self.delivery.pk)
        self.assertEqual(claimed.delivery_status, Status.ASSIGNED)
        self.assertEqual(claimed.assigned_driver_id, winner.id)

        for driver in others:
            with self.subTest(driver=driver.username):
                with self.assertRaises(DeliveryConflict):
                    services.claim_delivery(actor_for(driver), self.delivery.pk)

        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.assigned_driver_id, winner.id)
        self.assertOwnershipConsistent(self.delivery)

    def test_stale_snapshot_does_not_allow_second_claim(self):
        first, second = self.drivers[:2]
        snapshot = DeliveryRequest.objects.get(pk=self.delivery.pk)
        self.assertEqual(snapshot.delivery_status, Status.PENDING)

        services.claim_delivery(actor_for(first), self.delivery.pk)
        with self.assertRaises(DeliveryConflict):
            services.claim_delivery(actor_for(second), snapshot.pk)

    def test_claim_is_a_single_conditional_update(self):
        actor = actor_for(self.drivers[0])
        with CaptureQueriesContext(connection) as ctx:
            services.claim_delivery(actor, self.delivery.pk)
        first_sql = ctx.captured_queries[0]["sql"].upper()
        self.assertTrue(first_sql.startswith("UPDATE"), first_sql)
        self.assertIn("DELIVERY_STATUS", first_sql.split("WHERE", 1)[1])
        self.assertIn("IS NULL", first_sql.split("WHERE", 1)[1])

    def test_missing_record_is_a_conflict(self):
        with self.assertRaises(DeliveryConflict):
            services.claim_delivery(actor_for(self.drivers[0]), 999999)

    def test_only_drivers_claim(self):
        with self.assertRaises(PermissionDenied):
            services.claim_delivery(actor_for(self.cust), self.delivery.pk)
        self.assertOwnershipConsistent(self.delivery)

    def test_rejected_order_can_still_be_claimed(self):
        self.delivery.shop_confirmation_status = Confirmation.REJECTED
        self.delivery.save(update_fields=["shop_confirmation_status"])
        claimed = services.claim_delivery(actor_for(self.drivers[0]), self.delivery.pk)
        self.assertEqual(claimed.delivery_status, Status.ASSIGNED)


class AdvanceStatusTests(OwnershipConsistencyMixin, TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.driver, _ = make_user("drv", "driver")
        self.other_driver, _ = make_user("drv2", "driver")
        self.delivery = make_delivery(self.cust)
        services.claim_delivery(actor_for(self.driver), self.delivery.pk)

    def test_forward_moves(self):
        picked = services.advance_status(actor_for(self.driver), self.delivery.pk, "Picked")
        self.assertEqual(picked.delivery_status, Status.PICKED)
        self.assertOwnershipConsistent(self.delivery)
        delivered = services.advance_status(actor_for(self.driver), self.delivery.pk, "Delivered")
        self.assertEqual(delivered.delivery_status, Status.DELIVERED)
        self.assertOwnershipConsistent(self.delivery)

    def test_assigned_straight_to_delivered(self):
        delivered = services.advance_status(actor_for(self.driver), self.delivery.pk, "Delivered")
        self.assertEqual(delivered.delivery_status, Status.DELIVERED)

    def test_same_status_is_accepted(self):
        services.advance_status(actor_for(self.driver), self.delivery.pk, "Picked")
        again = services.advance_status(actor_for(self.driver), self.delivery.pk, "Picked")
        self.assertEqual(again.delivery_status, Status.PICKED)

    def test_backwards_move_rejected_and_status_unchanged(self):
        services.advance_status(actor_for(self.driver), self.delivery.pk, "Delivered")
        with self.assertRaises(TransitionNotAllowed):
            services.advance_status(actor_for(self.driver), self.delivery.pk, "Picked")
        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.delivery_status, Status.DELIVERED)

    def test_targets_outside_advance_set_rejected(self):
        services.advance_status(actor_for(self.driver), self.delivery.pk, "Picked")
        for target in ("Assigned", "Pending", "Lost", None):
            with self.subTest(target=target):
                with self.assertRaises(ValidationError):
                    services.advance_status(actor_for(self.driver), self.delivery.pk, target)
        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.delivery_status, Status.PICKED)

    def test_only_assigned_driver(self):
        with self.assertRaises(PermissionDenied):
            services.advance_status(actor_for(self.other_driver), self.delivery.pk, "Picked")

    def test_unknown_delivery(self):
        with self.assertRaises(NotFound):
            services.advance_status(actor_for(self.driver), 999999, "Picked")


class UnassignTests(OwnershipConsistencyMixin, TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.driver, _ = make_user("drv", "driver")
        self.other_driver, _ = make_user("drv2", "driver")
        self.delivery = make_delivery(self.cust)
        services.claim_delivery(actor_for(self.driver), self.delivery.pk)

    def test_release_returns_job_to_pool(self):
        released = services.unassign_delivery(actor_for(self.driver), self.delivery.pk)
        self.assertEqual(released.delivery_status, Status.PENDING)
        self.assertIsNone(released.assigned_driver_id)
        self.assertOwnershipConsistent(self.delivery)
        self.assertIn(self.delivery.pk, [d.pk for d in services.list_available(actor_for(self.other_driver))])

    def test_releasing_driver_can_claim_again(self):
        services.unassign_delivery(actor_for(self.driver), self.delivery.pk)
        again = services.claim_delivery(actor_for(self.driver), self.delivery.pk)
        self.assertEqual(again.assigned_driver_id, self.driver.id)

    def test_cannot_release_after_pickup(self):
        services.advance_status(actor_for(self.driver), self.delivery.pk, "Picked")
        with self.assertRaises(TransitionNotAllowed) as ctx:
            services.unassign_delivery(actor_for(self.driver), self.delivery.pk)
        self.assertIn("only unassign while status is Assigned", str(ctx.exception.detail))
        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.delivery_status, Status.PICKED)
        self.assertEqual(self.delivery.assigned_driver_id, self.driver.id)

    def test_only_assigned_driver(self):
        with self.assertRaises(PermissionDenied):
            services.unassign_delivery(actor_for(self.other_driver), self.delivery.pk)
        self.assertOwnershipConsistent(self.delivery)


class CancelTests(TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.other_cust, _ = make_user("cust2", "customer")
        self.driver, _ = make_user("drv", "driver")
        self.delivery = make_delivery(self.cust)

    def test_cancel_deletes_then_second_cancel_is_not_found(self):
        services.cancel_delivery(actor_for(self.cust), self.delivery.pk)
        self.assertFalse(DeliveryRequest.objects.filter(pk=self.delivery.pk).exists())
        with self.assertRaises(NotFound):
            services.cancel_delivery(actor_for(self.cust), self.delivery.pk)

    def test_only_creator(self):
        with self.assertRaises(PermissionDenied):
            services.cancel_delivery(actor_for(self.other_cust), self.delivery.pk)
        self.assertTrue(DeliveryRequest.objects.filter(pk=self.delivery.pk).exists())

    def test_only_while_pending(self):
        assign(self.delivery, self.driver)
        with self.assertRaises(TransitionNotAllowed):
            services.cancel_delivery(actor_for(self.cust), self.delivery.pk)
        self.assertTrue(DeliveryRequest.objects.filter(pk=self.delivery.pk).exists())

    def test_drivers_cannot_cancel(self):
        with self.assertRaises(PermissionDenied):
            services.cancel_delivery(actor_for(self.driver), self.delivery.pk)


class ShopConfirmationTests(TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.shop, _ = make_user("store", "shop", shop_id="shop1")
        self.other_shop, _ = make_user("pharmacy", "shop", shop_id="shop2")
        self.delivery = make_delivery(self.cust, shop_id="shop1")

    def test_accept_stamps_time_and_note(self):
        confirmed = services.confirm_shop_order(
            actor_for(self.shop), self.delivery.pk, "accept", "Ready at 5pm"
        )
        self.assertEqual(confirmed.shop_confirmation_status, Confirmation.ACCEPTED)
        self.assertIsNotNone(confirmed.shop_confirmation_at)
        self.assertEqual(confirmed.shop_note, "Ready at 5pm")
        self.assertEqual(confirmed.delivery_status, Status.PENDING)

    def test_reject_is_terminal(self):
        services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, "reject", "Out of stock")
        for action in ("accept", "reject"):
            with self.subTest(action=action):
                with self.assertRaises(DeliveryConflict):
                    services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, action)
        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.shop_confirmation_status, Confirmation.REJECTED)
        self.assertEqual(self.delivery.shop_note, "Out of stock")

    def test_accepted_order_can_still_be_rejected(self):
        services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, "accept")
        rejected = services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, "reject")
        self.assertEqual(rejected.shop_confirmation_status, Confirmation.REJECTED)

    def test_note_truncated_and_kept_when_absent(self):
        services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, "accept", "n" * 500)
        self.delivery.refresh_from_db()
        self.assertEqual(len(self.delivery.shop_note), 300)

        services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, "accept")
        self.delivery.refresh_from_db()
        self.assertEqual(len(self.delivery.shop_note), 300)

    def test_other_shop_forbidden(self):
        with self.assertRaises(PermissionDenied):
            services.confirm_shop_order(actor_for(self.other_shop), self.delivery.pk, "accept")

    def test_invalid_action(self):
        with self.assertRaises(ValidationError):
            services.confirm_shop_order(actor_for(self.shop), self.delivery.pk, "maybe")

    def test_unknown_delivery(self):
        with self.assertRaises(NotFound):
            services.confirm_shop_order(actor_for(self.shop), 999999, "accept")

    def test_non_shop_actor(self):
        with self.assertRaises(PermissionDenied):
            services.confirm_shop_order(actor_for(self.cust), self.delivery.pk, "accept")


class ListingTests(TestCase):
    def setUp(self):
        self.cust, _ = make_user("cust", "customer")
        self.other_cust, _ = make_user("cust2", "customer")
        self.driver, _ = make_user("drv", "driver")
        self.shop, _ = make_user("store", "shop", shop_id="shop1")
        self.mine = make_delivery(self.cust, shop_id="shop1")
        self.theirs = make_delivery(self.other_cust, shop_id="shop2")
        self.taken = assign(make_delivery(self.other_cust, shop_id="shop1"), self.driver)

    def test_list_mine(self):
        ids = [d.pk for d in services.list_mine(actor_for(self.cust))]
        self.assertEqual(ids, [self.mine.pk])

    def test_list_available_excludes_assigned(self):
        ids = [d.pk for d in services.list_available(actor_for(self.driver))]
        self.assertEqual(ids, [self.theirs.pk, self.mine.pk])

    def test_list_assigned(self):
        ids = [d.pk for d in services.list_assigned(actor_for(self.driver))]
        self.assertEqual(ids, [self.taken.pk])

    def test_list_shop_orders(self):
        ids = [d.pk for d in services.list_shop_orders(actor_for(self.shop))]
        self.assertEqual(ids, [self.taken.pk, self.mine.pk])

    def test_roles_enforced(self):
        with self.assertRaises(PermissionDenied):
            services.list_available(actor_for(self.cust))
        with self.assertRaises(PermissionDenied):
            services.list_mine(actor_for(self.driver))
        with self.assertRaises(PermissionDenied):
            services.list_shop_orders(actor_for(self.driver))
