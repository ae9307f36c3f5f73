"""Cancellation token handed to subscription routines."""


class CancellationToken:
    """Marks a mount lifecycle as torn down.

    A subscription routine checks the token after its registration completes
    and releases the handle at once if teardown already happened.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
