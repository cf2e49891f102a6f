"""
Retry engine для ограниченного числа попыток.

Включает:
- Clamp числа попыток (минимум 1)
- Решение о retry только для ошибок транспорта
- Exponential backoff с jitter (выключен при backoff_base=0)
"""

import logging
import random
import time

from .config import RetryConfig

logger = logging.getLogger(__name__)


class RetryEngine:
    """
    Механизм retry для одного вызова execute.

    Engine не хранит счётчик попыток: номер попытки передаётся явно,
    поэтому один RetryConfig безопасно использовать из нескольких потоков.

    Examples:
        >>> engine = RetryEngine(RetryConfig(max_attempts=3))
        >>> for attempt in range(engine.max_attempts):
        ...     if attempt:
        ...         engine.wait(attempt)
        ...     # send
    """

    def __init__(self, config: RetryConfig):
        """
        Args:
            config: Конфигурация retry
        """
        self.config = config

    @property
    def max_attempts(self) -> int:
        """Эффективное число попыток (минимум 1)."""
        return max(self.config.max_attempts, 1)

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """
        Решить нужна ли следующая попытка.

        Args:
            error: Исключение текущей попытки
            attempt: Номер текущей попытки (с нуля)

        Returns:
            True если ошибка retryable и попытки ещё остались
        """
        if attempt + 1 >= self.max_attempts:
            return False

        # Фатальные ошибки НЕ ретраим
        if getattr(error, 'fatal', False):
            return False

        return bool(getattr(error, 'retryable', False))

    def get_wait_time(self, attempt: int) -> float:
        """
        Вычислить время ожидания перед попыткой.

        Args:
            attempt: Номер попытки, перед которой ждём (1 = первый retry)

        Returns:
            Секунды для ожидания
        """
        if self.config.backoff_base <= 0:
            return 0.0

        wait = self.config.backoff_base * (
            self.config.backoff_factor ** (attempt - 1)
        )

        # Ограничить максимумом
        wait = min(wait, self.config.backoff_max)

        # Добавить jitter (50-150% от wait)
        if self.config.backoff_jitter:
            jitter = 0.5 + random.random()
            wait = wait * jitter

        return wait

    def wait(self, attempt: int) -> float:
        """Подождать перед попыткой; возвращает фактическую задержку."""
        wait_time = self.get_wait_time(attempt)
        if wait_time > 0:
            logger.debug(f"Waiting {wait_time:.2f}s before attempt {attempt + 1}")
            time.sleep(wait_time)
        return wait_time
