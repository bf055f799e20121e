# locgate/interfaces/lifecycle_notifier.py
from __future__ import annotations

from typing import Callable, Protocol

from locgate.model.lifecycle import LifecycleState

LifecycleObserver = Callable[[LifecycleState], None]


class LifecycleNotifier(Protocol):
    def add_observer(self, observer: LifecycleObserver) -> None: ...
    def remove_observer(self, observer: LifecycleObserver) -> None: ...
