"""Tests for the sequential bulk runner and its summary."""
import pytest

from content_scheduler.core.exceptions import ItemOperationError
from content_scheduler.scheduler.bulk import BulkResult, run_sequential, summarize, notify_summary
from content_scheduler.services.notifier import NotificationLevel


class Timeline:
    """Records operation calls and sleeps in one ordered list."""

    def __init__(self, failing=()):
        self.events = []
        self.failing = set(failing)

    async def operation(self, item):
        self.events.append(("call", item))
        if item in self.failing:
            raise RuntimeError(f"item {item} failed")

    async def sleep(self, seconds):
        self.events.append(("sleep", seconds))


class TestRunSequential:
    @pytest.mark.asyncio
    async def test_isolates_failures_and_keeps_order(self):
        timeline = Timeline(failing={2, 4})

        result = await run_sequential([1, 2, 3, 4, 5], timeline.operation, delay_between=1.0,
                                      sleep=timeline.sleep)

        assert (result.success_count, result.failure_count, result.total) == (3, 2, 5)
        assert timeline.events == [
            ("call", 1), ("sleep", 1.0),
            ("call", 2), ("sleep", 1.0),
            ("call", 3), ("sleep", 1.0),
            ("call", 4), ("sleep", 1.0),
            ("call", 5),
        ]

    @pytest.mark.asyncio
    async def test_collects_item_errors(self):
        timeline = Timeline(failing={"b"})

        result = await run_sequential(["a", "b"], timeline.operation, sleep=timeline.sleep)

        assert len(result.failures) == 1
        error = result.failures[0]
        assert isinstance(error, ItemOperationError)
        assert error.item == "b"
        assert isinstance(error.cause, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        timeline = Timeline()

        result = await run_sequential([], timeline.operation, sleep=timeline.sleep)

        assert result.to_dict() == {"success_count": 0, "failure_count": 0, "total": 0}
        assert timeline.events == []

    @pytest.mark.asyncio
    async def test_single_item_has_no_delay(self):
        timeline = Timeline()

        await run_sequential(["only"], timeline.operation, delay_between=5, sleep=timeline.sleep)

        assert timeline.events == [("call", "only")]

    @pytest.mark.asyncio
    async def test_all_failing_still_completes(self):
        timeline = Timeline(failing={1, 2, 3})

        result = await run_sequential([1, 2, 3], timeline.operation, sleep=timeline.sleep)

        assert result.failure_count == 3
        assert result.success_count == 0

    @pytest.mark.asyncio
    async def test_next_item_starts_after_previous_finished(self):
        active = []
        overlaps = []

        async def operation(item):
            if active:
                overlaps.append(item)
            active.append(item)
            await sleep_noop(0)
            active.remove(item)

        async def sleep_noop(_):
            return None

        await run_sequential(range(4), operation, sleep=sleep_noop)
        assert overlaps == []


class TestSummary:
    def test_all_succeeded(self):
        level, message = summarize(BulkResult(3, 0, 3), "Массовое подключение")
        assert level == NotificationLevel.SUCCESS
        assert "3" in message

    def test_partial(self):
        level, message = summarize(BulkResult(3, 2, 5), "Массовое подключение", "сектор Tech")
        assert level == NotificationLevel.WARNING
        assert "сектор Tech" in message

    def test_total_failure(self):
        level, _ = summarize(BulkResult(0, 2, 2), "Массовая отправка")
        assert level == NotificationLevel.ERROR

    @pytest.mark.parametrize("result, expected", [
        (BulkResult(2, 0, 2), True),
        (BulkResult(1, 1, 2), False),
        (BulkResult(), False),
    ])
    def test_level_follows_all_succeeded(self, result, expected):
        level, _ = summarize(result, "Проверка профилей")

        assert result.all_succeeded is expected
        assert (level == NotificationLevel.SUCCESS) is expected

    @pytest.mark.asyncio
    async def test_notify_summary_sends_one_notification(self, notifier):
        await notify_summary(notifier, BulkResult(1, 1, 2), "Массовая отправка")
        assert notifier.levels() == [NotificationLevel.WARNING]
