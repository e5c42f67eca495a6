from datetime import datetime, time
from typing import Optional

import pytz

from config import CHECKOUT_HOUR
from enums.guest_status import GuestStatus
from utils.clock import as_utc, business_timezone, to_business_time


def checkout_cutoff(check_out: datetime) -> datetime:
    """
    The instant a stay ends: the check-out's calendar date in the business
    timezone, at the checkout hour. Returned as an aware UTC datetime.
    """
    tz = business_timezone()
    local_date = to_business_time(check_out).date()
    cutoff = tz.localize(datetime.combine(local_date, time(hour=CHECKOUT_HOUR)))
    return cutoff.astimezone(pytz.utc)


def compute_guest_status(check_out: datetime, now: Optional[datetime] = None) -> GuestStatus:
    now = as_utc(now) if now is not None else datetime.now(pytz.utc)
    if now < checkout_cutoff(check_out):
        return GuestStatus.ACTIVE
    return GuestStatus.INACTIVE
