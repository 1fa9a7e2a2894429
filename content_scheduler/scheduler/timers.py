"""
Таймеры отложенных публикаций

Timer - абстракция «выполнить callback через delay секунд».
TimerRegistry - локальная (не сохраняемая) карта ID записи → таймер.
"""

import itertools
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional

from content_scheduler.core.clock import Clock
from content_scheduler.core.exceptions import PastScheduleError
from content_scheduler.core.logger import logger
from content_scheduler.models import PublicationPayload
from content_scheduler.scheduler.task_scheduler import TaskScheduler

DispatchHandler = Callable[[str, PublicationPayload], Awaitable]


class Timer:
    """Отложенный вызов async callback"""

    def schedule(self, delay: float, callback: Callable[..., Awaitable], *args) -> str:
        """Запланировать callback(*args) через delay секунд, вернуть токен отмены"""
        raise NotImplementedError

    def cancel(self, token: str) -> None:
        """Отменить таймер (без ошибки, если уже сработал)"""
        raise NotImplementedError


class ApschedulerTimer(Timer):
    """
    Таймеры через разовые задачи AsyncIOScheduler.

    APScheduler ждёт не дольше TIMEOUT_MAX за один шаг event loop и
    пересчитывает ожидание, поэтому далёкие даты не срабатывают раньше времени.
    """

    def __init__(self, task_scheduler: TaskScheduler, clock: Clock):
        self.task_scheduler = task_scheduler
        self.clock = clock

    def schedule(self, delay: float, callback: Callable[..., Awaitable], *args) -> str:
        token = f"timer_{uuid.uuid4().hex[:12]}"
        run_date = self.clock.now().astimezone(timezone.utc) + timedelta(seconds=delay)
        self.task_scheduler.add_date_job(callback, run_date, args=args, job_id=token)
        return token

    def cancel(self, token: str) -> None:
        self.task_scheduler.remove_job(token)


@dataclass
class TimerEntry:
    """Взведённый таймер публикации"""
    task_id: str
    target_time: datetime
    payload: PublicationPayload
    token: str
    generation: int


class TimerRegistry:
    """
    Карта ID публикации → ожидающий таймер.

    Живёт только в памяти процесса и никогда не обращается к хранилищу.
    Доступ только из event loop, блокировки не нужны.
    """

    def __init__(self, timer: Timer, clock: Clock, handler: Optional[DispatchHandler] = None):
        """
        Args:
            timer: Реализация таймеров
            clock: Источник текущего времени
            handler: async handler(task_id, payload), вызывается при срабатывании
        """
        self.timer = timer
        self.clock = clock
        self.handler = handler
        self._entries: Dict[str, TimerEntry] = {}
        self._generations = itertools.count(1)

    def arm(self, task_id: str, target_time: datetime, payload: PublicationPayload) -> TimerEntry:
        """
        Взвести таймер публикации (повторный arm заменяет предыдущий)

        Raises:
            PastScheduleError: target_time не в будущем
        """
        now = self.clock.now()
        if target_time <= now:
            raise PastScheduleError(task_id, target_time)

        self.cancel(task_id)

        generation = next(self._generations)
        # В UTC: разница локальных времён при смене летнего времени неверна на час
        delay = (target_time.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()
        token = self.timer.schedule(delay, self._fire, task_id, generation)

        entry = TimerEntry(
            task_id=task_id,
            target_time=target_time,
            payload=payload,
            token=token,
            generation=generation
        )
        self._entries[task_id] = entry

        hours_left = round(delay / 3600)
        logger.info(
            f"⏰ Публикация \"{payload.title}\" запланирована на "
            f"{target_time.strftime('%d.%m.%Y %H:%M')} (через ~{hours_left} ч)"
        )
        return entry

    def cancel(self, task_id: str) -> bool:
        """Отменить таймер публикации, True если он был"""
        entry = self._entries.pop(task_id, None)
        if entry is None:
            return False

        self.timer.cancel(entry.token)
        logger.info(f"🗑️ Таймер публикации {task_id} отменён")
        return True

    def cancel_all(self) -> int:
        """Отменить все таймеры"""
        ids = self.list_ids()
        for task_id in ids:
            self.cancel(task_id)
        return len(ids)

    def contains(self, task_id: str) -> bool:
        return task_id in self._entries

    def get(self, task_id: str) -> Optional[TimerEntry]:
        return self._entries.get(task_id)

    def count(self) -> int:
        return len(self._entries)

    def list_ids(self) -> List[str]:
        return list(self._entries.keys())

    async def _fire(self, task_id: str, generation: int):
        entry = self._entries.get(task_id)

        # Таймер отменён или заменён новым arm
        if entry is None or entry.generation != generation:
            logger.debug(f"Таймер {task_id}#{generation} устарел, пропуск")
            return

        try:
            if self.handler is not None:
                await self.handler(task_id, entry.payload)
        finally:
            # Удаляем только сработавшую запись, не более новую
            current = self._entries.get(task_id)
            if current is not None and current.generation == generation:
                del self._entries[task_id]


__all__ = ["Timer", "ApschedulerTimer", "TimerEntry", "TimerRegistry"]
