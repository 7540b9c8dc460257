"""
Общий сервис уведомлений: одно активное уведомление на всё приложение.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from campus_admin.models import Notification, NotificationKind


logger = logging.getLogger("campus_admin.notifications")

Listener = Callable[[Optional[Notification]], None]


class NotificationCenter:
    """
    Показывает не более одного уведомления.

    Уведомление об успехе исчезает само: индикатор `progress` убывает
    от 100 до 0 за `duration` секунд шагами по `tick`, параллельно
    таймер истечения убирает уведомление. Ошибки висят до явного
    закрытия или замены. Новое уведомление отменяет таймеры предыдущего.

    Attributes:
        duration: Время жизни уведомления об успехе в секундах
        tick: Шаг обратного отсчёта в секундах
        current: Активное уведомление
        progress: Остаток индикатора в процентах
    """

    def __init__(self, duration: float = 3.0, tick: float = 0.1):
        self.duration = duration
        self.tick = tick
        self.current: Optional[Notification] = None
        self.progress: float = 0.0
        self._countdown: Optional[asyncio.Task] = None
        self._expiry: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(cls, settings) -> "NotificationCenter":
        return cls(duration=settings.notification_duration, tick=settings.notification_tick)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Подписывает на смену уведомления.

        Returns:
            Callable[[], None]: Функция отписки
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def enqueue(self, notification: Notification) -> None:
        self._cancel_timers()
        self.current = notification
        self.progress = 100.0
        logger.debug(f"Уведомление [{notification.kind.value}]: {notification.text}")

        if notification.is_success:
            self._start_timers()
        self._emit()

    def success(self, text: str) -> None:
        self.enqueue(Notification(kind=NotificationKind.SUCCESS, text=text))

    def error(self, text: str) -> None:
        self.enqueue(Notification(kind=NotificationKind.ERROR, text=text))

    def dismiss(self) -> None:
        self._cancel_timers()
        if self.current is None:
            return
        self.current = None
        self.progress = 0.0
        self._emit()

    def close(self) -> None:
        """Отменяет таймеры без оповещения подписчиков."""
        self._cancel_timers()
        self._listeners.clear()

    def _start_timers(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Вне цикла событий таймеры запустить некому, уведомление остаётся до замены
            logger.debug("Нет активного цикла событий, автоскрытие уведомления отключено")
            return
        steps = max(1, round(self.duration / self.tick))
        self._countdown = loop.create_task(self._run_countdown(steps))
        self._expiry = loop.create_task(self._run_expiry())

    async def _run_countdown(self, steps: int) -> None:
        decrement = 100.0 / steps
        for _ in range(steps):
            await asyncio.sleep(self.tick)
            self.progress = max(0.0, self.progress - decrement)

    async def _run_expiry(self) -> None:
        await asyncio.sleep(self.duration)
        self._expiry = None
        self.dismiss()

    def _cancel_timers(self) -> None:
        try:
            running = asyncio.current_task()
        except RuntimeError:
            running = None
        for task in (self._countdown, self._expiry):
            if task is not None and not task.done() and task is not running:
                task.cancel()
        self._countdown = None
        self._expiry = None

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self.current)
