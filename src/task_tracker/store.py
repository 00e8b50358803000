"""
Ordered event channel for state transitions.

User-driven actions and auth push events both go through `Store.dispatch`.
Actions are applied strictly in delivery order; an action dispatched from
inside a subscriber is queued behind the one being applied, never nested.
"""

import logging
from collections import deque
from typing import Callable, Optional

from task_tracker.state import Action, AppState, reduce

logger = logging.getLogger(__name__)

Reducer = Callable[[AppState, Action], AppState]
Subscriber = Callable[[AppState, Action], None]


class Store:
    def __init__(self, state: Optional[AppState] = None, reducer: Reducer = reduce):
        self._state = state if state is not None else AppState()
        self._reducer = reducer
        self._pending: deque[Action] = deque()
        self._dispatching = False
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Call `subscriber(state, action)` after each applied action. Returns an unsubscribe function."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(subscriber)
            except ValueError:
                pass
        return unsubscribe

    def dispatch(self, action: Action) -> AppState:
        self._pending.append(action)
        if self._dispatching:
            return self._state

        self._dispatching = True
        try:
            while self._pending:
                current = self._pending.popleft()
                self._state = self._reducer(self._state, current)
                logger.debug("Applied %s", type(current).__name__)
                for subscriber in list(self._subscribers):
                    subscriber(self._state, current)
        finally:
            # Actions queued behind one that raised are dropped, not replayed on the next dispatch.
            self._pending.clear()
            self._dispatching = False
        return self._state
