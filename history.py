import logging

logger = logging.getLogger(__name__)


class History:
    """
    Linear undo/redo over whole-document snapshots.

    ``past`` runs oldest to newest; ``future[0]`` is the next state to redo.
    Any new snapshot clears ``future``.
    """
    def __init__(self, limit=None):
        self.limit = limit
        self.past = []
        self.future = []

    @property
    def can_undo(self):
        return bool(self.past)

    @property
    def can_redo(self):
        return bool(self.future)

    def push_snapshot(self, document):
        """Records the current document as the newest undo step."""
        self.past.append(document.snapshot())
        self.future.clear()
        if self.limit is not None and len(self.past) > self.limit:
            del self.past[0]
        logger.debug("History snapshot pushed (%d past)", len(self.past))

    def undo(self, current):
        """Returns the previous document, or None if there is nothing to undo."""
        if not self.past:
            return None
        previous = self.past.pop()
        self.future.insert(0, current.snapshot())
        return previous

    def redo(self, current):
        """Returns the next document, or None if there is nothing to redo."""
        if not self.future:
            return None
        following = self.future.pop(0)
        self.past.append(current.snapshot())
        return following

    def clear(self):
        self.past.clear()
        self.future.clear()
