from datetime import timedelta
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from notifications import campaigns
from notifications.gateway import SendResult
from notifications.models import BroadcastCampaign, BroadcastRecipient, Outcome
from orders.models import Order
from profiles.models import Profile

User = get_user_model()

PHONES = [f"+25191100000{i}" for i in range(1, 6)]


def make_order(phone, code):
    return Order.objects.create(
        tracking_code=code, customer_name="C", phone=phone, location="L", items=[], total=0
    )


def failing_for(*bad_numbers):
    def _send(to, body):
        if to in bad_numbers:
            return SendResult(Outcome.FAILED, "mock", "rejected")
        return SendResult(Outcome.SENT, "mock", {"body": body})
    return _send


@override_settings(
    SMS_PROVIDER="mock",
    BROADCAST_IN_PROCESS_RETRY=False,
    BROADCAST_RETRY_DELAY_SECONDS=600,
    BROADCAST_RETRY_LEASE_SECONDS=300,
    BROADCAST_EXCLUDED_NUMBERS=[],
)
class CollectRecipientsTests(TestCase):
    def test_union_of_orders_and_profiles_deduplicated(self):
        make_order("+251911000001", "FD-000001")
        make_order("+251911000001", "FD-000002")
        make_order("0911000002", "FD-000003")
        user = User.objects.create_user("+251711000003", password="x")
        Profile.objects.create(user=user, name="P", phone="+251711000003")
        self.assertEqual(
            campaigns.collect_recipients(),
            ["+251711000003", "+251911000001", "+251911000002"],
        )

    @override_settings(BROADCAST_EXCLUDED_NUMBERS=["0911000001"])
    def test_excluded_numbers_removed(self):
        make_order("+251911000001", "FD-000001")
        make_order("+251911000002", "FD-000002")
        self.assertEqual(campaigns.collect_recipients(), ["+251911000002"])


@override_settings(
    SMS_PROVIDER="mock",
    BROADCAST_IN_PROCESS_RETRY=False,
    BROADCAST_RETRY_DELAY_SECONDS=600,
    BROADCAST_RETRY_LEASE_SECONDS=300,
    BROADCAST_EXCLUDED_NUMBERS=[],
)
class BroadcastTests(TestCase):
    def setUp(self):
        for i, phone in enumerate(PHONES):
            make_order(phone, f"FD-00000{i}")

    def test_first_round_counts_and_retry_state(self):
        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[2])) as send:
            summary = campaigns.broadcast("Closed tomorrow")

        self.assertEqual(summary["total_numbers"], 5)
        self.assertEqual(summary["sent_first_round"], 4)
        self.assertEqual(summary["failed_first_round"], 1)
        self.assertTrue(summary["retry_scheduled"])
        # 4 successes plus 3 attempts for the failing number
        self.assertEqual(send.call_count, 7)

        campaign = BroadcastCampaign.objects.get(pk=summary["campaign_id"])
        pending = campaign.recipients.get(status=BroadcastRecipient.Status.RETRY_PENDING)
        self.assertEqual(pending.phone, PHONES[2])
        self.assertEqual(pending.attempts, campaigns.TIER1_ATTEMPTS)
        self.assertIsNotNone(pending.next_attempt_at)
        self.assertEqual(campaign.recipients.filter(status=BroadcastRecipient.Status.SENT).count(), 4)

    def test_retry_stops_after_first_success(self):
        calls = {"n": 0}

        def flaky(to, body):
            calls["n"] += 1
            outcome = Outcome.SENT if calls["n"] >= 2 else Outcome.FAILED
            return SendResult(outcome, "mock", None)

        delivery = None
        with mock.patch("notifications.campaigns.send_message", side_effect=flaky):
            delivery = campaigns.deliver_with_retries(PHONES[0], "hi", 3)
        self.assertTrue(delivery.sent)
        self.assertEqual(delivery.attempts, 2)

    def test_all_sent_schedules_nothing(self):
        summary = campaigns.broadcast("hello")
        self.assertEqual(summary["sent_first_round"], 5)
        self.assertFalse(summary["retry_scheduled"])
        self.assertFalse(
            BroadcastRecipient.objects.filter(status=BroadcastRecipient.Status.RETRY_PENDING).exists()
        )

    def test_no_recipients(self):
        Order.objects.all().delete()
        summary = campaigns.broadcast("hello")
        self.assertEqual(summary["total_numbers"], 0)
        self.assertFalse(summary["retry_scheduled"])

    def test_second_wave_runs_when_due(self):
        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[2], PHONES[4])):
            summary = campaigns.broadcast("hello")

        # not due yet
        self.assertEqual(campaigns.process_due_retries()["processed"], 0)

        later = timezone.now() + timedelta(seconds=601)
        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[4])) as send:
            stats = campaigns.process_due_retries(now=later)
        self.assertEqual(stats, {"processed": 2, "sent": 1, "failed": 1})
        # PHONES[2] succeeds at once; PHONES[4] uses both tier 2 attempts
        self.assertEqual(send.call_count, 1 + campaigns.TIER2_ATTEMPTS)

        recipients = {r.phone: r for r in BroadcastRecipient.objects.filter(campaign_id=summary["campaign_id"])}
        self.assertEqual(recipients[PHONES[2]].status, BroadcastRecipient.Status.SENT)
        self.assertEqual(recipients[PHONES[4]].status, BroadcastRecipient.Status.FAILED)
        self.assertEqual(
            recipients[PHONES[4]].attempts, campaigns.TIER1_ATTEMPTS + campaigns.TIER2_ATTEMPTS
        )

        # a second sweep finds nothing left to do
        self.assertEqual(campaigns.process_due_retries(now=later)["processed"], 0)

    def test_claim_is_exclusive(self):
        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[0])):
            campaigns.broadcast("hello")
        pk = BroadcastRecipient.objects.get(phone=PHONES[0]).pk
        later = timezone.now() + timedelta(seconds=601)
        self.assertEqual(campaigns._claim([pk], later), [pk])
        self.assertEqual(campaigns._claim([pk], later), [])

        row = BroadcastRecipient.objects.get(pk=pk)
        self.assertEqual(row.status, BroadcastRecipient.Status.RETRYING)
        self.assertEqual(row.next_attempt_at, later + timedelta(seconds=300))

    def test_row_from_crashed_sweep_is_retried_after_lease(self):
        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[3])):
            summary = campaigns.broadcast("hello")
        later = timezone.now() + timedelta(seconds=601)

        with mock.patch("notifications.campaigns.deliver_all", side_effect=RuntimeError("worker died")):
            with self.assertRaises(RuntimeError):
                campaigns.process_due_retries(now=later)
        row = BroadcastRecipient.objects.get(campaign_id=summary["campaign_id"], phone=PHONES[3])
        self.assertEqual(row.status, BroadcastRecipient.Status.RETRYING)

        # lease still running: nothing to do
        stats = campaigns.process_due_retries(now=later + timedelta(seconds=299))
        self.assertEqual(stats["processed"], 0)

        stats = campaigns.process_due_retries(now=later + timedelta(seconds=301))
        self.assertEqual(stats, {"processed": 1, "sent": 1, "failed": 0})
        row.refresh_from_db()
        self.assertEqual(row.status, BroadcastRecipient.Status.SENT)
        self.assertIsNone(row.next_attempt_at)

    def test_sweep_limited_to_campaign(self):
        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[0])):
            first = campaigns.broadcast("one")
            campaigns.broadcast("two")
        later = timezone.now() + timedelta(seconds=601)
        stats = campaigns.process_due_retries(now=later, campaign_id=first["campaign_id"])
        self.assertEqual(stats["processed"], 1)
        self.assertEqual(
            BroadcastRecipient.objects.filter(status=BroadcastRecipient.Status.RETRY_PENDING).count(), 1
        )

    def test_management_command(self):
        out = StringIO()
        call_command("process_sms_retries", stdout=out)
        self.assertIn("No retries due", out.getvalue())

        with mock.patch("notifications.campaigns.send_message", side_effect=failing_for(PHONES[1])):
            campaigns.broadcast("hello")
        BroadcastRecipient.objects.filter(status=BroadcastRecipient.Status.RETRY_PENDING).update(
            next_attempt_at=timezone.now() - timedelta(seconds=1)
        )
        out = StringIO()
        call_command("process_sms_retries", stdout=out)
        self.assertIn("Retried 1 recipients: 1 sent, 0 failed", out.getvalue())
