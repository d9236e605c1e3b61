"""Date/time context handed to the prompt: today, this week, rounded now."""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass(frozen=True)
class WeekInfo:
    monday:   date
    friday:   date
    weekdays: list[tuple[str, date]]

    @property
    def sunday(self) -> date:
        return self.weekdays[6][1]


@dataclass(frozen=True)
class TemporalContext:
    now:           datetime
    weekday_name:  str
    date_text:     str
    time_text:     str
    rounded_now:   datetime
    timezone_name: str
    week:          WeekInfo

    @property
    def rounded_time_text(self) -> str:
        return format_time(self.rounded_now)


def week_of(day: date) -> WeekInfo:
    """Monday-to-Sunday week containing ``day``; weekday() is 0 on Monday."""
    monday = day - timedelta(days=day.weekday())
    weekdays = [(name, monday + timedelta(days=i)) for i, name in enumerate(DAY_NAMES)]
    return WeekInfo(monday=monday, friday=monday + timedelta(days=4), weekdays=weekdays)


def round_to_quarter_hour(dt: datetime) -> datetime:
    """Snap to the nearest :00/:15/:30/:45, rolling over into the next hour at 60."""
    minutes = (dt.minute + 7) // 15 * 15
    base = dt.replace(minute=0, second=0, microsecond=0)
    return base + timedelta(minutes=minutes)


def format_date(d: date) -> str:
    return f"{d.month}/{d.day}/{d.year}"


def format_time(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d}:{dt.second:02d} {suffix}"


def localize(now: datetime | None, tz: tzinfo) -> datetime:
    """Current instant in ``tz``; naive values are taken to already be local."""
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def build_temporal_context(now: datetime | None = None, tz: tzinfo | str = "UTC") -> TemporalContext:
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    now = localize(now, tz)
    return TemporalContext(
        now=now,
        weekday_name=DAY_NAMES[now.weekday()],
        date_text=format_date(now.date()),
        time_text=format_time(now),
        rounded_now=round_to_quarter_hour(now),
        timezone_name=str(tz),
        week=week_of(now.date()),
    )
