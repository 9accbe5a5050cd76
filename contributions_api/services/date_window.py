from datetime import datetime
from datetime import time
from datetime import timedelta
from datetime import UTC

from dateutil.relativedelta import relativedelta

from contributions_api.api.schemas.contributions import DateWindow
from contributions_api.api.schemas.contributions import QueryOptions


END_OF_DAY = time(23, 59, 59)


def duration_delta(options: QueryOptions) -> relativedelta:
    """Return the single duration to subtract, by priority d > w > m > y."""

    if options.days:
        return relativedelta(days=options.days)
    if options.weeks:
        return relativedelta(days=options.weeks * 7)
    if options.months:
        return relativedelta(months=options.months)
    return relativedelta(months=(options.years or 1) * 12)


def align_to_week_start(value: datetime) -> datetime:
    """Move `value` back to the most recent Sunday, keeping Sundays as-is."""

    weekday = (value.weekday() + 1) % 7
    return value - timedelta(days=weekday)


def resolve_date_window(
    options: QueryOptions,
    now: datetime | None = None,
    align_week_start: bool = True,
) -> DateWindow:
    """Compute the `from`/`to` instants for a contributions query.

    An explicit `from` is used verbatim and all durations are ignored.
    Otherwise `from` is the start of the `to` day minus one duration,
    optionally snapped back to the start of its week. A `to` earlier than
    `from` is passed through unchanged.
    """

    if options.to_date is not None:
        to = datetime.combine(options.to_date, END_OF_DAY, tzinfo=UTC)
    else:
        to = now or datetime.now(UTC)

    if options.from_date is not None:
        from_ = datetime.combine(options.from_date, time.min, tzinfo=UTC)
        return DateWindow(from_=from_, to=to)

    from_ = datetime.combine(to.date(), time.min, tzinfo=to.tzinfo or UTC)
    from_ -= duration_delta(options)
    if align_week_start:
        from_ = align_to_week_start(from_)

    return DateWindow(from_=from_, to=to)
