"""
Кастомные исключения для планировщика публикаций
"""


class ContentSchedulerError(Exception):
    """Базовое исключение для всех ошибок приложения"""
    pass


class ConfigError(ContentSchedulerError):
    """Ошибка конфигурации"""
    pass


class ValidationError(ContentSchedulerError):
    """Действие отклонено: данные записи не подходят"""
    pass


class PastScheduleError(ContentSchedulerError):
    """Попытка запланировать публикацию на прошедшее время"""

    def __init__(self, task_id: str, target_time):
        self.task_id = task_id
        self.target_time = target_time
        super().__init__(
            f"Время публикации {target_time.isoformat()} для {task_id} уже прошло"
        )


class StaleScheduleSkip(ContentSchedulerError):
    """
    Статус записи изменился после постановки таймера.
    Не ошибка: публикация молча пропускается.
    """

    def __init__(self, task_id: str, status=None):
        self.task_id = task_id
        self.status = status
        super().__init__(f"Публикация {task_id} пропущена (статус: {status})")


class DispatchFailedError(ContentSchedulerError):
    """Ошибка отправки в webhook"""
    pass


class StoreError(ContentSchedulerError):
    """Ошибка удалённого хранилища"""
    pass


class StoreReadError(StoreError):
    """Ошибка чтения из хранилища"""
    pass


class StoreWriteError(StoreError):
    """Ошибка записи в хранилище"""
    pass


class ItemOperationError(ContentSchedulerError):
    """Ошибка обработки одного элемента массовой операции"""

    def __init__(self, item, cause: Exception):
        self.item = item
        self.cause = cause
        super().__init__(f"{item}: {cause}")


__all__ = [
    "ContentSchedulerError",
    "ConfigError",
    "ValidationError",
    "PastScheduleError",
    "StaleScheduleSkip",
    "DispatchFailedError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "ItemOperationError"
]
