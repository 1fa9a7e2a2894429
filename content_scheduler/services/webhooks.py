"""
Клиенты внешних webhooks (публикация и проспекция)
"""

import asyncio
import aiohttp
from typing import Any, Dict, List, Optional

from content_scheduler.core.exceptions import DispatchFailedError
from content_scheduler.core.logger import logger
from content_scheduler.models import PublicationPayload


class WebhookClient:
    """POST JSON в webhook, успех определяется HTTP статусом"""

    def __init__(self, url: str, timeout: int = 30):
        self.url = url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def post(self, data: Dict[str, Any]) -> str:
        """
        Отправка данных в webhook

        Args:
            data: JSON тело запроса

        Returns:
            Текст ответа webhook

        Raises:
            DispatchFailedError: ответ не 2xx, сетевая ошибка или таймаут
        """
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()

        try:
            async with self.session.post(
                self.url,
                json=data,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                text = await response.text()

                if response.status >= 300:
                    logger.error(f"❌ Webhook error {response.status}: {text[:200]}")
                    raise DispatchFailedError(
                        f"Webhook error: {response.status} {response.reason}"
                    )

                return text

        except asyncio.TimeoutError as e:
            raise DispatchFailedError(f"Timeout: webhook не ответил за {self.timeout}с") from e
        except aiohttp.ClientError as e:
            raise DispatchFailedError(f"{type(e).__name__}: {e}") from e

    async def close(self):
        """Закрытие сессии"""
        if self.session:
            await self.session.close()
            self.session = None


class PublishWebhookClient(WebhookClient):
    """Webhook публикации контента в соцсети"""

    async def publish(self, payload: PublicationPayload, images: List[str]) -> None:
        """
        Отправить публикацию

        Args:
            payload: Снимок публикации
            images: Уже отобранные URL изображений
        """
        data = {
            "nom": payload.title,
            "images": images,
            "description": payload.description,
            "informations": payload.extra_info,
            "plateformes": list(payload.platforms),
        }

        logger.info(f"📤 Отправка в webhook публикации: {payload.title} ({len(images)} изобр.)")
        await self.post(data)


class ProspectionWebhookClient(WebhookClient):
    """Webhook проспекции LinkedIn"""

    ACTION_CONNECT = "connexion"
    ACTION_PUBLISH = "publier"
    ACTION_VERIFY = "connexion verification"

    async def connect(self, profile_link: str) -> str:
        """Запрос на подключение, возвращает новое состояние профиля"""
        result = await self.post({"action": self.ACTION_CONNECT, "lien LinkedIn": profile_link})
        return result.strip()

    async def publish_message(self, profile_link: str, message: str) -> None:
        """Отправка сообщения подключённому профилю"""
        await self.post({
            "action": self.ACTION_PUBLISH,
            "lien LinkedIn": profile_link,
            "message": message
        })

    async def verify_connection(self, profile_link: str) -> str:
        """Проверка, принят ли запрос на подключение"""
        result = await self.post({"action": self.ACTION_VERIFY, "lien LinkedIn": profile_link})
        return result.strip()


__all__ = ["WebhookClient", "PublishWebhookClient", "ProspectionWebhookClient"]
