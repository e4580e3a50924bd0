"""Background metadata refresh for the completer.

This module provides a MetadataRefresher that rebuilds the metadata
snapshot off the caller's thread and swaps it into a Completer only when
the whole snapshot loaded in time.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor

from .completion import Completer
from .exceptions import MetadataRefreshError
from .metadata import Metadata, MetadataProvider, SpecialCommand, build_metadata

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_TIMEOUT = 10.0


class _Refresh:
    """One requested refresh, settled once by its load or by its timeout."""

    def __init__(self) -> None:
        self.result: Future[bool] = Future()
        self.finished = False
        self.timer: threading.Timer | None = None


class MetadataRefresher:
    """Loads metadata snapshots for a Completer.

    Loads run one at a time on a single worker thread, and each load applies
    its own snapshot from that thread. Snapshots therefore reach the
    completer in the order refreshes were requested. A failed or late load
    leaves the completer on its previous snapshot; snapshots are never
    merged.

    A provider call that hangs can't be interrupted. Its refresh times out,
    but the worker stays busy, and refreshes requested after it wait in the
    queue and use up their own timeout there. A warning is logged when a
    refresh has to queue behind a load that is still running.

    Usage:
        with MetadataRefresher(provider, completer) as refresher:
            refresher.refresh()            # blocks up to timeout
            refresher.refresh_async()      # returns Future[bool]
    """

    def __init__(
        self,
        provider: MetadataProvider,
        completer: Completer,
        *,
        timeout: float = DEFAULT_REFRESH_TIMEOUT,
        specials: Iterable[SpecialCommand | str | tuple[str, str]] = (),
        favorites: Iterable[str] | Callable[[], Iterable[str]] = (),
    ):
        """Initialize the refresher.

        Args:
            provider: Source of schema information.
            completer: Completer that receives new snapshots.
            timeout: Seconds a refresh may take, queue time included.
            specials: Backslash commands to include in every snapshot.
            favorites: Favorite names, or a callable returning them at load time.
        """
        self._provider = provider
        self._completer = completer
        self._timeout = timeout
        self._specials = tuple(specials)
        self._favorites = favorites
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sqlcomplete-meta-")
        self._lock = threading.Lock()
        self._apply_lock = threading.Lock()
        self._pending = 0
        self._shutdown = False

    @property
    def timeout(self) -> float:
        return self._timeout

    def _favorite_names(self) -> list[str]:
        if not callable(self._favorites):
            return list(self._favorites)
        try:
            return list(self._favorites())
        except Exception as error:
            raise MetadataRefreshError("favorites", error) from error

    def _load(self) -> Metadata:
        start = time.monotonic()
        metadata = build_metadata(self._provider, specials=self._specials, favorites=self._favorite_names())
        logger.debug(
            "metadata loaded in %.3fs: %d tables, %d views",
            time.monotonic() - start,
            len(metadata.tables),
            len(metadata.views),
        )
        return metadata

    def _settle(self, refresh: _Refresh) -> bool:
        """Claim the right to resolve ``refresh``; False if already resolved."""
        with self._apply_lock:
            if refresh.finished:
                return False
            refresh.finished = True
        if refresh.timer is not None:
            refresh.timer.cancel()
        return True

    def _run(self, refresh: _Refresh) -> None:
        """Worker task: load, then apply unless the refresh already timed out."""
        try:
            metadata = self._load()
        except MetadataRefreshError as error:
            if self._settle(refresh):
                logger.warning("Metadata refresh failed: %s; keeping previous snapshot", error)
                refresh.result.set_result(False)
            return
        except Exception as error:
            if self._settle(refresh):
                refresh.result.set_exception(error)
            return

        with self._apply_lock:
            if refresh.finished:
                logger.info("Discarding metadata that loaded after its refresh timed out")
                return
            refresh.finished = True
            self._completer.update_metadata(metadata)
        if refresh.timer is not None:
            refresh.timer.cancel()
        refresh.result.set_result(True)

    def _expire(self, refresh: _Refresh) -> None:
        if self._settle(refresh):
            logger.warning("Metadata refresh timed out after %.1fs; keeping previous snapshot", self._timeout)
            refresh.result.set_result(False)

    def _load_done(self, refresh: _Refresh, future: Future[None]) -> None:
        with self._lock:
            self._pending -= 1
        # Queued loads cancelled by shutdown never run _run
        if future.cancelled() and self._settle(refresh):
            refresh.result.set_result(False)

    def _start(self) -> Future[bool]:
        refresh = _Refresh()
        with self._lock:
            if self._shutdown:
                raise RuntimeError("Refresher has been shut down")
            if self._pending:
                logger.warning(
                    "Metadata refresh queued behind %d unfinished load(s); it may time out waiting",
                    self._pending,
                )
            self._pending += 1
            refresh.timer = threading.Timer(self._timeout, self._expire, args=(refresh,))
            refresh.timer.daemon = True
            refresh.timer.start()
            future = self._executor.submit(self._run, refresh)
        future.add_done_callback(lambda f: self._load_done(refresh, f))
        return refresh.result

    def refresh(self) -> bool:
        """Reload metadata, waiting at most ``timeout`` seconds.

        Returns:
            True if the completer got a new snapshot, False otherwise.

        Raises:
            RuntimeError: If the refresher has been shut down.
        """
        return self._start().result()

    def refresh_async(self) -> Future[bool]:
        """Reload metadata in the background.

        Returns:
            A Future resolving to the same value ``refresh`` would return.
        """
        return self._start()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting refreshes and release the worker thread."""
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True

        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def __enter__(self) -> MetadataRefresher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=False)
