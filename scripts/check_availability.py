#!/usr/bin/env python3
"""
Local availability check against a JSON studio file (no HTTP).

Usage:
  python3 scripts/check_availability.py --service svc-1 --date 2026-03-11
  python3 scripts/check_availability.py --service svc-1 --month 2026-03 --public
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

load_dotenv()

from app.application.exceptions import StoreReadError  # noqa: E402
from app.application.use_cases.availability import AvailabilityUseCase  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.domain.entities.availability import BookingChannel  # noqa: E402
from app.infrastructure.store.json_store import JsonStudioStore  # noqa: E402
from app.wiring.dependencies import get_time_grid  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Print bookable slots or a month map from a studio JSON file")
    parser.add_argument("--data-file", default=settings.STORE_DATA_FILE)
    parser.add_argument("--tenant", default=settings.TENANT_ID)
    parser.add_argument("--service", required=True)
    parser.add_argument("--date", help="YYYY-MM-DD")
    parser.add_argument("--month", help="YYYY-MM")
    parser.add_argument("--home-visit", action="store_true")
    parser.add_argument("--ignore-blocks", action="store_true")
    parser.add_argument("--public", action="store_true", help="Apply the online booking cutoff")
    args = parser.parse_args()

    if not args.date and not args.month:
        parser.error("one of --date or --month is required")

    tz = ZoneInfo(settings.BUSINESS_TIMEZONE)
    store = JsonStudioStore(data_file=args.data_file, timezone=tz)
    use_case = AvailabilityUseCase(
        appointments=store,
        blocks=store,
        catalog=store,
        studio_settings=store,
        timezone=tz,
        grid=get_time_grid(),
        slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        default_cutoff_before_close_minutes=settings.ONLINE_CUTOFF_BEFORE_CLOSE_MINUTES,
        default_last_slot_lead_minutes=settings.ONLINE_LAST_SLOT_BEFORE_CLOSE_MINUTES,
    )
    channel = BookingChannel.public if args.public else BookingChannel.internal

    try:
        if args.date:
            slots = use_case.get_available_slots(
                args.tenant,
                args.service,
                args.date,
                is_home_visit=args.home_visit,
                ignore_blocks=args.ignore_blocks,
                channel=channel,
            )
            status = use_case.get_date_block_status(args.tenant, args.date)
            print(f"{args.date} ({channel.value}): {', '.join(slots) if slots else 'no slots'}")
            print(f"blocks={status.has_blocks} shift={status.has_shift}")
        if args.month:
            days = use_case.get_month_available_days(
                args.tenant,
                args.service,
                args.month,
                is_home_visit=args.home_visit,
                ignore_blocks=args.ignore_blocks,
                channel=channel,
            )
            for iso, available in days.items():
                print(f"{iso}  {'open' if available else '-'}")
    except StoreReadError as e:
        print(f"Studio data unavailable: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
