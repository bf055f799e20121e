# locgate/interfaces/notification_sink.py
from typing import Protocol


class NotificationSink(Protocol):
    def show_error(self, message: str) -> None: ...
