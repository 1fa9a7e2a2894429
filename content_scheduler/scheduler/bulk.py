"""
Последовательное выполнение массовых операций с паузой между вызовами

Строго по одному элементу: downstream webhook ограничен по частоте,
параллелить нельзя.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple, TypeVar

from content_scheduler.core.exceptions import ItemOperationError
from content_scheduler.core.logger import logger
from content_scheduler.services.notifier import Notifier, NotificationLevel

T = TypeVar("T")


@dataclass
class BulkResult:
    """Итог массовой операции"""
    success_count: int = 0
    failure_count: int = 0
    total: int = 0
    failures: List[ItemOperationError] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.total > 0 and self.failure_count == 0

    def to_dict(self) -> dict:
        return {
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "total": self.total,
        }


async def run_sequential(
    items: Iterable[T],
    operation: Callable[[T], Awaitable],
    delay_between: float = 1.0,
    describe: Callable[[T], str] = str,
    sleep: Callable[[float], Awaitable] = asyncio.sleep
) -> BulkResult:
    """
    Выполнить operation для каждого элемента по очереди

    Args:
        items: Элементы в порядке обработки
        operation: async функция для одного элемента
        delay_between: Пауза в секундах после каждого элемента, кроме последнего
        describe: Имя элемента для логов
        sleep: Функция ожидания (подменяется в тестах)

    Returns:
        BulkResult со счётчиками; ошибки элементов не пробрасываются
    """
    items = list(items)
    result = BulkResult(total=len(items))

    for index, item in enumerate(items):
        name = describe(item)
        logger.info(f"🔄 {index + 1}/{result.total}: {name}")

        try:
            await operation(item)
            result.success_count += 1
        except Exception as e:
            error = ItemOperationError(name, e)
            result.failures.append(error)
            result.failure_count += 1
            logger.error(f"❌ Ошибка для {name}: {e}")

        if index < result.total - 1:
            await sleep(delay_between)

    logger.info(
        f"📊 Массовая операция завершена: "
        f"✅ {result.success_count} успешно, "
        f"❌ {result.failure_count} ошибок, "
        f"всего {result.total}"
    )
    return result


def summarize(result: BulkResult, action: str, scope: Optional[str] = None) -> Tuple[NotificationLevel, str]:
    """
    Текст итогового уведомления по счётчикам

    Args:
        result: Итог run_sequential
        action: Название операции («Массовое подключение»)
        scope: Уточнение, например сектор
    """
    label = f"{action} ({scope})" if scope else action

    if result.all_succeeded:
        return (
            NotificationLevel.SUCCESS,
            f"🎉 {label} завершено успешно: {result.success_count} из {result.total}"
        )
    if result.success_count > 0:
        return (
            NotificationLevel.WARNING,
            f"{label} завершено с ошибками: ✅ {result.success_count}, ❌ {result.failure_count}"
        )
    return (
        NotificationLevel.ERROR,
        f"{label} не удалось: ни один профиль не обработан"
    )


async def notify_summary(
    notifier: Notifier,
    result: BulkResult,
    action: str,
    scope: Optional[str] = None
) -> None:
    """Одно итоговое уведомление по массовой операции"""
    level, message = summarize(result, action, scope)
    await notifier.notify(level, message)


__all__ = ["BulkResult", "run_sequential", "summarize", "notify_summary"]
