"""Shared test fixtures for the content scheduler."""
import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Set
from zoneinfo import ZoneInfo

import pytest

from content_scheduler.core.clock import Clock
from content_scheduler.core.exceptions import DispatchFailedError
from content_scheduler.models import CalendarRecord, ProspectRecord, PublicationStatus, ProspectState
from content_scheduler.services.notifier import Notifier
from content_scheduler.scheduler.publication_scheduler import PublicationScheduler
from content_scheduler.scheduler.timers import Timer
from content_scheduler.services.prospection import ProspectionService
from content_scheduler.store.memory import InMemoryScheduleStore, InMemoryProspectStore

TZ = "Europe/Paris"
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=ZoneInfo(TZ))


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = NOW):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float):
        self.current = self.current.astimezone(timezone.utc) + timedelta(seconds=seconds)


class ManualTimer(Timer):
    """Timer driven by FakeClock: callbacks run only inside advance()."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.pending: Dict[str, tuple] = {}
        self._ids = itertools.count(1)
        self.cancelled: List[str] = []

    def schedule(self, delay, callback, *args) -> str:
        seq = next(self._ids)
        token = f"t{seq}"
        due = self.clock.now().astimezone(timezone.utc) + timedelta(seconds=delay)
        self.pending[token] = (due, seq, callback, args)
        return token

    def cancel(self, token: str) -> None:
        if self.pending.pop(token, None) is not None:
            self.cancelled.append(token)

    async def advance_to(self, target: datetime):
        while True:
            due = [
                (when, seq, token) for token, (when, seq, _, _) in self.pending.items()
                if when <= target
            ]
            if not due:
                break
            when, _, token = min(due)
            _, _, callback, args = self.pending.pop(token)
            self.clock.current = max(self.clock.current, when)
            await callback(*args)
        self.clock.current = max(self.clock.current, target)

    async def advance(self, seconds: float):
        await self.advance_to(self.clock.now().astimezone(timezone.utc) + timedelta(seconds=seconds))


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages: List[tuple] = []

    async def notify(self, level, message):
        self.messages.append((level, message))

    def levels(self):
        return [level for level, _ in self.messages]


class FakePublishWebhook:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[dict] = []

    async def publish(self, payload, images):
        self.calls.append({"payload": payload, "images": images})
        if self.fail:
            raise DispatchFailedError("Webhook error: 500 Internal Server Error")


class FakeProspectionWebhook:
    def __init__(self, connect_state: str = ProspectState.CONNECTED, failing_links: Optional[Set[str]] = None):
        self.connect_state = connect_state
        self.failing_links = failing_links or set()
        self.calls: List[tuple] = []

    def _record(self, action, link, message=None):
        self.calls.append((action, link, message))
        if link in self.failing_links:
            raise DispatchFailedError(f"Webhook error: 502 for {link}")

    async def connect(self, profile_link):
        self._record("connexion", profile_link)
        return self.connect_state

    async def publish_message(self, profile_link, message):
        self._record("publier", profile_link, message)

    async def verify_connection(self, profile_link):
        self._record("connexion verification", profile_link)
        return "ok"


def make_record(record_id="rec-1", status=PublicationStatus.SCHEDULED, days_ahead=1, **kwargs) -> CalendarRecord:
    values = {
        "id": record_id,
        "title": f"Post {record_id}",
        "status": status,
        "target_date": (NOW + timedelta(days=days_ahead)).date(),
        "platforms": ["LinkedIn", "Instagram"],
        "description": "Nouvelle offre",
        "images": [
            {"url": "https://cdn.example/a.png", "vote": "up"},
            {"url": "https://cdn.example/b.png", "vote": None},
            {"url": "https://cdn.example/c.png", "vote": "down"},
        ],
    }
    values.update(kwargs)
    return CalendarRecord(**values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer(clock):
    return ManualTimer(clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def webhook():
    return FakePublishWebhook()


@pytest.fixture
def store():
    return InMemoryScheduleStore()


@pytest.fixture
def scheduler(store, webhook, notifier, clock, timer):
    return PublicationScheduler(
        store=store,
        webhook=webhook,
        notifier=notifier,
        clock=clock,
        timer=timer,
        timezone=TZ,
        reconcile_interval=60
    )


@pytest.fixture
def prospects():
    return [
        ProspectRecord(id="p1", name="Alice", sector="Tech", profile_link="https://li/alice",
                       state=ProspectState.PENDING_ACCEPTANCE),
        ProspectRecord(id="p2", name="Bruno", sector="Tech", profile_link="https://li/bruno",
                       state="Connecté", message="Bonjour Bruno"),
        ProspectRecord(id="p3", name="Chloé", sector="Santé", profile_link="https://li/chloe",
                       state=ProspectState.REFUSED, message="Bonjour"),
        ProspectRecord(id="p4", name="David", sector="Santé", profile_link="",
                       state=ProspectState.PENDING_ACCEPTANCE),
        ProspectRecord(id="p5", name="Emma", sector="Santé", profile_link="https://li/emma",
                       state=ProspectState.PUBLISHED, message="Bonjour Emma"),
        ProspectRecord(id="p6", name="Félix", sector="Santé", profile_link="https://li/felix",
                       state=ProspectState.CONNECTED, message=""),
    ]


@pytest.fixture
def prospect_store(prospects):
    return InMemoryProspectStore(prospects)


@pytest.fixture
def prospection_webhook():
    return FakeProspectionWebhook()


@pytest.fixture
def prospection(prospect_store, prospection_webhook, notifier):
    return ProspectionService(
        store=prospect_store,
        webhook=prospection_webhook,
        notifier=notifier,
        delay_between=0
    )
