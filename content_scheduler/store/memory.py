"""
Хранилища в памяти (для локального запуска без Supabase и для тестов)
"""

from typing import Dict, List, Optional

from content_scheduler.core.logger import logger
from content_scheduler.models import CalendarRecord, ProspectRecord, PublicationStatus
from content_scheduler.store.base import ScheduleStore, ProspectStore


class InMemoryScheduleStore(ScheduleStore):
    """
    In-memory календарь публикаций
    Для production используйте SupabaseScheduleStore
    """

    def __init__(self, records: Optional[List[CalendarRecord]] = None):
        self.records: Dict[str, CalendarRecord] = {}
        for record in records or []:
            self.put(record)

    def put(self, record: CalendarRecord) -> None:
        """Добавить или заменить запись"""
        self.records[record.id] = record

    def get(self, record_id: str) -> Optional[CalendarRecord]:
        return self.records.get(record_id)

    async def list_scheduled(self) -> List[CalendarRecord]:
        return [
            record for record in self.records.values()
            if record.is_scheduled and record.target_date is not None
        ]

    async def get_status(self, record_id: str) -> Optional[str]:
        record = self.records.get(record_id)
        return record.status if record else None

    async def update_status(
        self,
        record_id: str,
        status: str,
        expected: Optional[str] = None
    ) -> bool:
        record = self.records.get(record_id)

        if record is None:
            logger.warning(f"⚠️ Запись {record_id} не найдена для обновления статуса")
            return False

        if expected is not None and record.status != expected:
            return False

        value = status.value if isinstance(status, PublicationStatus) else status
        self.records[record_id] = record.model_copy(update={"status": value})
        return True


class InMemoryProspectStore(ProspectStore):
    """In-memory таблица профилей"""

    def __init__(self, prospects: Optional[List[ProspectRecord]] = None):
        self.prospects: Dict[str, ProspectRecord] = {}
        for prospect in prospects or []:
            self.prospects[prospect.id] = prospect

    async def list_prospects(self, sector: Optional[str] = None) -> List[ProspectRecord]:
        return [
            p for p in self.prospects.values()
            if sector is None or p.sector == sector
        ]

    async def get_prospect(self, prospect_id: str) -> Optional[ProspectRecord]:
        return self.prospects.get(prospect_id)

    async def list_by_state(self, state: str) -> List[ProspectRecord]:
        return [
            p for p in self.prospects.values()
            if p.state_is(state) and p.profile_link
        ]

    async def update_state(self, prospect_id: str, state: str) -> None:
        prospect = self.prospects.get(prospect_id)
        if prospect is None:
            logger.warning(f"⚠️ Профиль {prospect_id} не найден для обновления")
            return
        self.prospects[prospect_id] = prospect.model_copy(update={"state": state})


__all__ = ["InMemoryScheduleStore", "InMemoryProspectStore"]
