"""Time-boxed reversible actions.

An UndoWindow applies its action straight away and then keeps enough to
reverse it until a deadline passes. Nothing here reads a clock: callers pass
``now`` and drive expiry with ``tick``.
"""

import math
from collections.abc import Iterator
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

# Grace periods used by the commands, in seconds
SWIPE_DELETE_GRACE = 4
BULK_DELETE_GRACE = 7
UNDO_ADD_GRACE = 6


class UndoState(str, Enum):
    """Lifecycle of an undo window."""

    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    REVERTED = "reverted"


class ReversibleAction(Protocol):
    """A mutation that knows how to undo itself."""

    def apply(self) -> None: ...

    def revert(self) -> None: ...


class UndoWindow:
    """Idle -> Pending(deadline) -> Committed | Reverted."""

    def __init__(self) -> None:
        self.state = UndoState.IDLE
        self.deadline: datetime | None = None
        self._action: ReversibleAction | None = None

    def begin(self, action: ReversibleAction, grace_seconds: float, now: datetime) -> None:
        """Apply the action and open the grace period.

        Raises:
            RuntimeError: If the window was already started.
        """
        if self.state is not UndoState.IDLE:
            raise RuntimeError(f"Undo window already {self.state.value}")
        action.apply()
        self._action = action
        self.deadline = now + timedelta(seconds=grace_seconds)
        self.state = UndoState.PENDING

    def tick(self, now: datetime) -> bool:
        """Commit if the deadline has passed. Returns True on that transition."""
        if self.state is UndoState.PENDING and self.deadline is not None and now >= self.deadline:
            self._finish(UndoState.COMMITTED)
            return True
        return False

    def undo(self, now: datetime | None = None) -> bool:
        """Reverse the action while still pending.

        Args:
            now: Optional current time; an expired window commits instead.

        Returns:
            True if the action was reversed, False if there was nothing to undo.
        """
        if now is not None:
            self.tick(now)
        if self.state is not UndoState.PENDING or self._action is None:
            return False
        self._action.revert()
        self._finish(UndoState.REVERTED)
        return True

    def force_commit_now(self) -> bool:
        """Finalize early without touching the already-applied mutation."""
        if self.state is not UndoState.PENDING:
            return False
        self._finish(UndoState.COMMITTED)
        return True

    def seconds_remaining(self, now: datetime) -> int:
        """Whole seconds left before expiry, 0 once finished."""
        if self.state is not UndoState.PENDING or self.deadline is None:
            return 0
        remaining = (self.deadline - now).total_seconds()
        return max(0, math.ceil(remaining))

    @property
    def is_pending(self) -> bool:
        return self.state is UndoState.PENDING

    def _finish(self, state: UndoState) -> None:
        self.state = state
        self._action = None
        self.deadline = None


class UndoWindows:
    """Independent undo windows keyed by caller-chosen tokens.

    Each window carries its own deadline; one tick checks them all.
    """

    def __init__(self) -> None:
        self._windows: dict[str, UndoWindow] = {}

    def begin(self, key: str, action: ReversibleAction, grace_seconds: float, now: datetime) -> UndoWindow:
        """Start a window under a key, replacing a finished one."""
        window = UndoWindow()
        window.begin(action, grace_seconds, now)
        self._windows[key] = window
        return window

    def undo(self, key: str, now: datetime | None = None) -> bool:
        """Undo the window under a key. Unknown keys are a no-op."""
        window = self._windows.pop(key, None)
        if window is None:
            return False
        return window.undo(now)

    def tick(self, now: datetime) -> list[str]:
        """Expire due windows.

        Returns:
            Keys of the windows that committed on this tick.
        """
        committed = [key for key, window in self._windows.items() if window.tick(now)]
        for key in committed:
            del self._windows[key]
        return committed

    def get(self, key: str) -> UndoWindow | None:
        return self._windows.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._windows

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._windows))

    def __len__(self) -> int:
        return len(self._windows)
