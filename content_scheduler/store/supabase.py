"""
Хранилища поверх Supabase (PostgREST API через aiohttp)
"""

import asyncio
import aiohttp
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from content_scheduler.core.exceptions import StoreError, StoreReadError, StoreWriteError
from content_scheduler.core.logger import logger
from content_scheduler.models import CalendarRecord, ProspectRecord, PublicationStatus
from content_scheduler.store.base import ScheduleStore, ProspectStore

Params = Sequence[Tuple[str, str]]


class SupabaseClient:
    """Минимальный клиент PostgREST для таблиц Supabase"""

    def __init__(self, url: str, api_key: str, timeout: int = 30):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.api_key = api_key
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self.session

    async def select(self, table: str, params: Params) -> List[Dict[str, Any]]:
        """GET /rest/v1/{table} с фильтрами PostgREST"""
        return await self._request("GET", table, params, error_cls=StoreReadError)

    async def update(
        self,
        table: str,
        params: Params,
        values: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """PATCH /rest/v1/{table}, возвращает обновлённые строки"""
        return await self._request(
            "PATCH",
            table,
            params,
            json=values,
            headers={"Prefer": "return=representation"},
            error_cls=StoreWriteError
        )

    async def _request(
        self,
        method: str,
        table: str,
        params: Params,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        error_cls: Type[StoreError] = StoreError
    ) -> List[Dict[str, Any]]:
        session = self._ensure_session()

        try:
            async with session.request(
                method,
                f"{self.base_url}/{table}",
                params=list(params),
                json=json,
                headers=headers
            ) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    raise error_cls(
                        f"Supabase {method} {table}: {response.status} {error_text[:200]}"
                    )
                return await response.json()

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise error_cls(f"Supabase {method} {table}: {type(e).__name__}: {e}") from e

    async def close(self):
        """Закрытие сессии"""
        if self.session:
            await self.session.close()
            self.session = None


class SupabaseScheduleStore(ScheduleStore):
    """Календарь публикаций в таблице editorial_calendar"""

    def __init__(self, client: SupabaseClient, table: str = "editorial_calendar"):
        self.client = client
        self.table = table

    async def list_scheduled(self) -> List[CalendarRecord]:
        rows = await self.client.select(self.table, [
            ("select", "*"),
            ("statut", f"eq.{PublicationStatus.SCHEDULED.value}"),
            ("date_brute", "not.is.null"),
        ])
        return [CalendarRecord.from_row(row) for row in rows]

    async def get_status(self, record_id: str) -> Optional[str]:
        rows = await self.client.select(self.table, [
            ("select", "statut"),
            ("id", f"eq.{record_id}"),
        ])
        if not rows:
            return None
        return rows[0].get("statut")

    async def update_status(
        self,
        record_id: str,
        status: str,
        expected: Optional[str] = None
    ) -> bool:
        params = [("id", f"eq.{record_id}")]
        if expected is not None:
            params.append(("statut", f"eq.{_value(expected)}"))

        rows = await self.client.update(self.table, params, {"statut": _value(status)})
        return len(rows) > 0


class SupabaseProspectStore(ProspectStore):
    """Профили проспекции в таблице search_request"""

    def __init__(self, client: SupabaseClient, table: str = "search_request"):
        self.client = client
        self.table = table

    async def list_prospects(self, sector: Optional[str] = None) -> List[ProspectRecord]:
        params = [("select", "*"), ("order", "created_at.desc")]
        if sector:
            params.append(("secteur", f"eq.{sector}"))
        rows = await self.client.select(self.table, params)
        return [ProspectRecord.from_row(row) for row in rows]

    async def get_prospect(self, prospect_id: str) -> Optional[ProspectRecord]:
        rows = await self.client.select(self.table, [
            ("select", "*"),
            ("id", f"eq.{prospect_id}"),
        ])
        return ProspectRecord.from_row(rows[0]) if rows else None

    async def list_by_state(self, state: str) -> List[ProspectRecord]:
        rows = await self.client.select(self.table, [
            ("select", "*"),
            ("etat", f"ilike.{state}"),
            ("profil_link", "not.is.null"),
            ("profil_link", "neq."),
        ])
        return [ProspectRecord.from_row(row) for row in rows]

    async def update_state(self, prospect_id: str, state: str) -> None:
        rows = await self.client.update(
            self.table,
            [("id", f"eq.{prospect_id}")],
            {"etat": state}
        )
        if not rows:
            logger.warning(f"⚠️ Профиль {prospect_id} не найден для обновления")


def _value(status) -> str:
    return status.value if isinstance(status, PublicationStatus) else status


__all__ = ["SupabaseClient", "SupabaseScheduleStore", "SupabaseProspectStore"]
