"""
Главный файл запуска: API + планировщик публикаций и проспекции
"""
import asyncio

import uvicorn

from content_scheduler.core.config import config
from content_scheduler.core.exceptions import ConfigError
from content_scheduler.core.logger import logger


async def main():
    """Запуск API; сервисы планировщика стартуют в lifespan приложения"""
    logger.info("=" * 80)
    logger.info("🚀 ЗАПУСК CONTENT SCHEDULER")
    logger.info("=" * 80)

    try:
        config.validate()
    except ConfigError as e:
        logger.error(f"❌ Ошибка конфигурации: {e}")
        return

    logger.info(f"🌍 Часовой пояс: {config.TIMEZONE}")
    logger.info("⏰ Публикации календаря: 09:00 в день публикации")
    logger.info(f"🔄 Сверка с базой: каждые {config.RECONCILE_INTERVAL_SECONDS} с")
    if config.PROSPECTION_DAILY_ENABLED:
        logger.info(f"📋 Проверка профилей: ежедневно в {config.PROSPECTION_DAILY_TIME}")
    logger.info(f"🌐 API: http://{config.API_HOST}:{config.API_PORT}/api/docs")
    logger.info("=" * 80)

    server = uvicorn.Server(uvicorn.Config(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        log_level="info"
    ))
    await server.serve()

    logger.info("👋 Планировщик остановлен")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("👋 Остановка по Ctrl+C")
