"""
Интерфейсы удалённых хранилищ
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from content_scheduler.models import CalendarRecord, ProspectRecord


class ScheduleStore(ABC):
    """
    Календарь публикаций - единственный источник истины.
    Может меняться другими процессами и вкладками в любой момент.
    """

    @abstractmethod
    async def list_scheduled(self) -> List[CalendarRecord]:
        """Все записи в статусе «Planifiée» с заданной датой"""

    @abstractmethod
    async def get_status(self, record_id: str) -> Optional[str]:
        """Текущий статус записи (None если записи нет)"""

    @abstractmethod
    async def update_status(
        self,
        record_id: str,
        status: str,
        expected: Optional[str] = None
    ) -> bool:
        """
        Обновить статус записи

        Args:
            record_id: ID записи
            status: Новый статус
            expected: Обновлять только если текущий статус равен этому значению

        Returns:
            True если запись обновлена
        """


class ProspectStore(ABC):
    """Таблица профилей для проспекции"""

    @abstractmethod
    async def list_prospects(self, sector: Optional[str] = None) -> List[ProspectRecord]:
        """Все профили (опционально только одного сектора)"""

    @abstractmethod
    async def get_prospect(self, prospect_id: str) -> Optional[ProspectRecord]:
        """Профиль по ID"""

    @abstractmethod
    async def list_by_state(self, state: str) -> List[ProspectRecord]:
        """Профили в состоянии state, у которых есть ссылка на профиль"""

    @abstractmethod
    async def update_state(self, prospect_id: str, state: str) -> None:
        """Записать новое состояние профиля"""


__all__ = ["ScheduleStore", "ProspectStore"]
