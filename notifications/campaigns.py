"""
Bulk SMS campaigns.

A broadcast goes out in two tiers:

1. Immediately: every recipient gets up to TIER1_ATTEMPTS sends in a row.
   Recipients are processed concurrently; the caller receives the tier 1
   counts as soon as this round finishes.
2. After BROADCAST_RETRY_DELAY_SECONDS: recipients that still failed get up
   to TIER2_ATTEMPTS more sends, again concurrently.

Tier 2 state lives in the database (`BroadcastRecipient` rows in
`retry_pending` with a due time). `process_due_retries` picks due rows up; it
is run by the `process_sms_retries` management command and, unless disabled,
by an in-process timer started with the campaign. Rows are claimed with a
conditional update that also sets a lease: a row left in `retrying` by a
crashed sweep becomes due again once BROADCAST_RETRY_LEASE_SECONDS pass.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from itertools import chain
from typing import Any, Dict, List, Tuple

from django.conf import settings
from django.db import connections, transaction
from django.utils import timezone

from common.phone import normalize_phone
from orders.models import Order
from profiles.models import Profile

from .gateway import send_message
from .models import BroadcastCampaign, BroadcastRecipient

logger = logging.getLogger(__name__)

TIER1_ATTEMPTS = 3
TIER2_ATTEMPTS = 2


@dataclass
class Delivery:
    """Result of delivering one message to one number (possibly after retries)."""

    phone: str
    sent: bool
    attempts: int
    info: Any = None


# ----------------------------- recipients -----------------------------

def collect_recipients() -> List[str]:
    """All known phone numbers (orders and user profiles), deduplicated.

    Operator-owned numbers listed in BROADCAST_EXCLUDED_NUMBERS are removed.
    """
    phones = set()
    for raw in chain(
        Order.objects.values_list("phone", flat=True).distinct(),
        Profile.objects.values_list("phone", flat=True),
    ):
        phone = normalize_phone(raw)
        if phone:
            phones.add(phone)

    excluded = {normalize_phone(p) for p in settings.BROADCAST_EXCLUDED_NUMBERS}
    return sorted(phones - excluded)


# ------------------------------ delivery ------------------------------

def deliver_with_retries(phone: str, message: str, attempts: int) -> Delivery:
    """Send up to `attempts` times back to back, stopping at the first success."""
    info = None
    for attempt in range(1, attempts + 1):
        try:
            result = send_message(phone, message)
        except Exception as e:
            logger.exception(f"Unexpected error sending broadcast to {phone}")
            info = str(e)
            continue
        info = result.info
        if result.sent:
            return Delivery(phone, True, attempt, info)
        logger.warning(f"Broadcast to {phone} failed (attempt {attempt}/{attempts})")
    return Delivery(phone, False, attempts, info)


def deliver_all(jobs: List[Tuple[str, str]], attempts: int) -> List[Delivery]:
    """Deliver (phone, message) jobs concurrently; results keep the input order."""
    if not jobs:
        return []
    workers = max(1, min(settings.BROADCAST_MAX_WORKERS, len(jobs)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="broadcast") as pool:
        return list(
            pool.map(lambda job: deliver_with_retries(job[0], job[1], attempts), jobs)
        )


# ------------------------------- tier 1 -------------------------------

def broadcast(message: str) -> Dict[str, Any]:
    """
    Send `message` to every known number and schedule the delayed retry wave.

    Args:
        message: Free-text SMS body

    Returns:
        Summary of the first round:
        {"campaign_id", "total_numbers", "sent_first_round",
         "failed_first_round", "retry_scheduled"}
    """
    phones = collect_recipients()
    logger.info(f"Broadcast starting to {len(phones)} numbers")

    results = deliver_all([(phone, message) for phone in phones], TIER1_ATTEMPTS)
    failed = [r for r in results if not r.sent]

    retry_at = timezone.now() + timedelta(seconds=settings.BROADCAST_RETRY_DELAY_SECONDS)
    with transaction.atomic():
        campaign = BroadcastCampaign.objects.create(
            message=message,
            total_numbers=len(phones),
            sent_first_round=len(results) - len(failed),
            failed_first_round=len(failed),
            retry_scheduled=bool(failed),
        )
        BroadcastRecipient.objects.bulk_create(
            [
                BroadcastRecipient(
                    campaign=campaign,
                    phone=r.phone,
                    status=(
                        BroadcastRecipient.Status.SENT
                        if r.sent
                        else BroadcastRecipient.Status.RETRY_PENDING
                    ),
                    attempts=r.attempts,
                    next_attempt_at=None if r.sent else retry_at,
                    last_response=r.info,
                )
                for r in results
            ]
        )

    logger.info(
        f"Broadcast {campaign.id} first round: {campaign.sent_first_round} sent, "
        f"{campaign.failed_first_round} failed"
    )

    if failed:
        transaction.on_commit(lambda: _start_retry_timer(campaign.id))

    return summarize(campaign)


def summarize(campaign: BroadcastCampaign) -> Dict[str, Any]:
    return {
        "campaign_id": campaign.id,
        "total_numbers": campaign.total_numbers,
        "sent_first_round": campaign.sent_first_round,
        "failed_first_round": campaign.failed_first_round,
        "retry_scheduled": campaign.retry_scheduled,
    }


# ------------------------------- tier 2 -------------------------------

_CLAIMABLE = (BroadcastRecipient.Status.RETRY_PENDING, BroadcastRecipient.Status.RETRYING)


def _claim(recipient_ids, now) -> List[int]:
    """
    Lease due rows to this sweep; only rows this call flipped are returned.

    A claimed row moves to `retrying` with `next_attempt_at` pushed out by
    BROADCAST_RETRY_LEASE_SECONDS. If the sweep dies before saving the
    outcome, the lease runs out and a later sweep claims the row again.
    """
    lease_until = now + timedelta(seconds=settings.BROADCAST_RETRY_LEASE_SECONDS)
    claimed = []
    for pk in recipient_ids:
        updated = BroadcastRecipient.objects.filter(
            pk=pk, status__in=_CLAIMABLE, next_attempt_at__lte=now
        ).update(
            status=BroadcastRecipient.Status.RETRYING,
            next_attempt_at=lease_until,
            updated_at=now,
        )
        if updated == 1:
            claimed.append(pk)
    return claimed


def process_due_retries(now=None, campaign_id=None) -> Dict[str, int]:
    """
    Run the second wave for every retry whose due time has passed.

    Rows still `retrying` after their lease expired (a previous sweep
    crashed) are picked up again.

    Args:
        now: Reference time (default: current time)
        campaign_id: Restrict the sweep to a single campaign

    Returns:
        {"processed", "sent", "failed"} for this sweep
    """
    now = now or timezone.now()
    due = BroadcastRecipient.objects.filter(status__in=_CLAIMABLE, next_attempt_at__lte=now)
    if campaign_id is not None:
        due = due.filter(campaign_id=campaign_id)

    claimed = _claim(list(due.values_list("pk", flat=True)), now)
    recipients = list(
        BroadcastRecipient.objects.filter(pk__in=claimed).select_related("campaign")
    )
    if not recipients:
        return {"processed": 0, "sent": 0, "failed": 0}

    results = deliver_all([(r.phone, r.campaign.message) for r in recipients], TIER2_ATTEMPTS)

    sent = 0
    for recipient, result in zip(recipients, results):
        recipient.status = (
            BroadcastRecipient.Status.SENT if result.sent else BroadcastRecipient.Status.FAILED
        )
        recipient.attempts += result.attempts
        recipient.next_attempt_at = None
        recipient.last_response = result.info
        recipient.save(update_fields=["status", "attempts", "next_attempt_at", "last_response", "updated_at"])
        sent += int(result.sent)

    failed = len(recipients) - sent
    logger.info(f"Broadcast retry wave: {len(recipients)} processed, {sent} sent, {failed} failed")
    return {"processed": len(recipients), "sent": sent, "failed": failed}


def _start_retry_timer(campaign_id: int):
    if not settings.BROADCAST_IN_PROCESS_RETRY:
        return
    timer = threading.Timer(
        settings.BROADCAST_RETRY_DELAY_SECONDS, _timer_sweep, args=(campaign_id,)
    )
    timer.daemon = True
    timer.start()
    logger.info(
        f"Broadcast {campaign_id} retry wave scheduled in "
        f"{settings.BROADCAST_RETRY_DELAY_SECONDS}s"
    )


def _timer_sweep(campaign_id: int):
    try:
        process_due_retries(campaign_id=campaign_id)
    except Exception:
        logger.exception(f"Broadcast {campaign_id} retry wave failed")
    finally:
        connections.close_all()
