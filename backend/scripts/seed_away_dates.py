"""Mark an inclusive date range as Away, e.g. for a vacation.

Usage: ``python -m scripts.seed_away_dates 2025-07-01 2025-07-07``
"""
from __future__ import annotations

import asyncio
import sys

from bakery.core.config import get_settings
from bakery.db.session import get_sessionmaker
from bakery.models.blocked_date import DateOverrideReason
from bakery.services import schedule_service
from bakery.services.date_utils import iter_dates, parse_calendar_date, today_in


async def seed_away(start: str, end: str) -> None:
    tz = get_settings().tz
    dates = list(iter_dates(parse_calendar_date(start, tz), parse_calendar_date(end, tz)))
    result = await schedule_service.bulk_set_status(
        get_sessionmaker(),
        dates=dates,
        reason=DateOverrideReason.AWAY,
        today=today_in(tz),
    )
    print(result.message)
    for day, error in result.failed:
        print(f"  {day.isoformat()}: {error}")


def main() -> None:
    if len(sys.argv) != 3:
        raise SystemExit("usage: seed_away_dates START END")
    asyncio.run(seed_away(sys.argv[1], sys.argv[2]))


if __name__ == "__main__":
    main()
