"""Generation tokens for superseding in-flight acquisitions."""

import threading

from src.utils.exceptions import AcquisitionCancelledError


class CancellationToken:
    """Cancellation signal for one document acquisition.

    Args:
        generation: Sequence number of the acquisition this token guards.
    """

    def __init__(self, generation: int = 0) -> None:
        self.generation = generation
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def raise_if_cancelled(self, filename: str = "document") -> None:
        """Raise ``AcquisitionCancelledError`` if this token was cancelled."""
        if self.cancelled:
            raise AcquisitionCancelledError(filename, self.generation)


class UploadSession:
    """Issues one token per upload; starting an upload cancels the previous one.

    Mirrors a user picking a new file while the previous one is still
    being recognised: the stale acquisition stops at its next page
    boundary instead of overwriting the newer result.

    The session is owned by an interactive caller that processes one
    document at a time and passes each token to
    ``DocumentProcessor.process``. The CLI and the HTTP API do not
    create sessions: each of their calls is independent, and one request
    must never cancel another.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._current: CancellationToken | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> CancellationToken:
        """Cancel the in-flight token, if any, and issue a new one."""
        with self._lock:
            if self._current is not None:
                self._current.cancel()
            self._generation += 1
            self._current = CancellationToken(self._generation)
            return self._current

    def is_current(self, token: CancellationToken) -> bool:
        with self._lock:
            return token is self._current and not token.cancelled
