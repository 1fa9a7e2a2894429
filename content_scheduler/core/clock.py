"""
Источник текущего времени и расчёт времени публикации
"""

from datetime import date, datetime, time
from typing import Union
from zoneinfo import ZoneInfo

# Публикации из календаря всегда уходят в 09:00 по местному времени
PUBLICATION_TIME = time(9, 0)


class Clock:
    """Источник текущего времени (подменяется в тестах)"""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    """Системные часы в заданном часовом поясе"""

    def __init__(self, timezone: str = "Europe/Paris"):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)


def parse_date(value: Union[str, date, datetime]) -> date:
    """Дата из строки ISO (YYYY-MM-DD) или date/datetime"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def publication_time(target_date: Union[str, date], timezone: str) -> datetime:
    """
    Момент публикации для даты календаря

    Args:
        target_date: Дата публикации
        timezone: Часовой пояс (например "Europe/Paris")

    Returns:
        datetime с tzinfo: дата @ 09:00
    """
    return datetime.combine(parse_date(target_date), PUBLICATION_TIME, tzinfo=ZoneInfo(timezone))


__all__ = ["Clock", "SystemClock", "PUBLICATION_TIME", "parse_date", "publication_time"]
