"""
Выполнение отложенной публикации: проверка статуса → webhook → статус «Publiée»
"""

from enum import Enum
from typing import Iterable, List

from content_scheduler.core.exceptions import ContentSchedulerError, StaleScheduleSkip
from content_scheduler.core.logger import logger
from content_scheduler.models import ImageRef, ImageVote, PublicationPayload, PublicationStatus
from content_scheduler.services.notifier import Notifier, NotificationLevel
from content_scheduler.services.webhooks import PublishWebhookClient
from content_scheduler.store.base import ScheduleStore


class DispatchOutcome(str, Enum):
    """Итог срабатывания таймера"""
    DISPATCHED = "dispatched"
    STALE = "stale"
    FAILED = "failed"


def select_images(images: Iterable[ImageRef]) -> List[str]:
    """
    Отбор изображений для публикации по голосам

    - есть хотя бы один «up» → только изображения с «up»
    - нет ни одного «down» → все изображения
    - иначе → все, кроме «down»
    """
    images = list(images)
    has_upvotes = any(img.vote == ImageVote.UP for img in images)
    has_downvotes = any(img.vote == ImageVote.DOWN for img in images)

    if has_upvotes:
        return [img.url for img in images if img.vote == ImageVote.UP]
    if not has_downvotes:
        return [img.url for img in images]
    return [img.url for img in images if img.vote != ImageVote.DOWN]


class DispatchGuard:
    """Повторная проверка статуса записи прямо перед публикацией"""

    def __init__(self, store: ScheduleStore):
        self.store = store

    async def check(self, task_id: str) -> None:
        """
        Raises:
            StaleScheduleSkip: статус уже не «Planifiée»
            StoreReadError: не удалось прочитать статус
        """
        status = await self.store.get_status(task_id)
        if status != PublicationStatus.SCHEDULED:
            raise StaleScheduleSkip(task_id, status)


class DispatchExecutor:
    """
    Публикация по срабатыванию таймера.

    Ошибки не пробрасываются наружу (вызывающего нет, таймер сработал
    асинхронно): каждая превращается в одно уведомление. Повторов нет.
    """

    def __init__(
        self,
        store: ScheduleStore,
        webhook: PublishWebhookClient,
        notifier: Notifier
    ):
        self.store = store
        self.webhook = webhook
        self.notifier = notifier
        self.guard = DispatchGuard(store)

    async def execute(self, task_id: str, payload: PublicationPayload) -> DispatchOutcome:
        logger.info(f"🚀 Выполнение запланированной публикации: {payload.title}")

        try:
            await self.guard.check(task_id)

            images = select_images(payload.images)
            await self.webhook.publish(payload, images)
            logger.info("✅ Публикация отправлена в webhook")

            updated = await self.store.update_status(
                task_id,
                PublicationStatus.DISPATCHED,
                expected=PublicationStatus.SCHEDULED
            )

        except StaleScheduleSkip as e:
            logger.info(f"⏭️ Публикация {payload.title} отменена (статус изменён: {e.status})")
            return DispatchOutcome.STALE

        except ContentSchedulerError as e:
            logger.error(f"❌ Ошибка запланированной публикации {payload.title}: {e}")
            await self.notifier.notify(
                NotificationLevel.ERROR,
                f"Ошибка автоматической публикации \"{payload.title}\": {e}"
            )
            return DispatchOutcome.FAILED

        except Exception as e:
            logger.error(
                f"❌ Непредвиденная ошибка публикации {payload.title}: {type(e).__name__}: {e}",
                exc_info=True
            )
            await self.notifier.notify(
                NotificationLevel.ERROR,
                f"Ошибка автоматической публикации \"{payload.title}\": {type(e).__name__}"
            )
            return DispatchOutcome.FAILED

        if updated:
            logger.info(f"✅ Статус обновлён на «Publiée»: {payload.title}")
            await self.notifier.notify(
                NotificationLevel.SUCCESS,
                f"Публикация \"{payload.title}\" опубликована автоматически 🚀"
            )
        else:
            # Webhook уже вызван, но статус успел поменять другой клиент
            logger.warning(f"⚠️ Статус {task_id} изменён во время публикации, запись не обновлена")
            await self.notifier.notify(
                NotificationLevel.WARNING,
                f"Публикация \"{payload.title}\" отправлена, но статус записи был изменён другим клиентом"
            )

        return DispatchOutcome.DISPATCHED


__all__ = ["DispatchOutcome", "select_images", "DispatchGuard", "DispatchExecutor"]
