from concurrent.futures import Future, ThreadPoolExecutor
import logging
from pathlib import Path
import threading
from typing import Optional

from .cache import Cache, FileCache, MemoryCache
from .connectivity import (ConnectivityMonitor, SocketMonitor, DEFAULT_PROBE_HOST, DEFAULT_PROBE_INTERVAL,
                           DEFAULT_PROBE_PORT, DEFAULT_PROBE_TIMEOUT)
from .errors import ApiError
from .model import Request, fingerprint
from .pending import PendingQueue
from .transport import ProgressCallback, Transport


logger = logging.getLogger(__name__)


DEFAULT_CACHE_DIRECTORY_LEVELS = 2


class RequestCoordinator:
    """
    Decides, for each request, whether to serve it from cache, execute it, or queue it for a retry.

    The connectivity flag and the pending queue are owned by the coordinator. Reads and writes of the flag are
    serialized by a lock, and every connectivity transition is processed on a single owner thread, so drain passes
    never overlap. Network I/O never happens while the lock is held, so callers on other threads are not blocked by
    an in-flight request or a drain pass.
    """

    def __init__(self, transport: Transport, cache: Cache, monitor: Optional[ConnectivityMonitor] = None,
                 connected: bool = False, owns_monitor: bool = False) -> None:
        """
        @param monitor
          The source of connectivity transitions, subscribed to until `close()`.
        @param connected
          The initial connectivity, used until the monitor first reports.
        @param owns_monitor
          Whether `close()` should also stop the monitor.
        """
        self.transport = transport
        self.cache = cache
        self.pending = PendingQueue()
        self.__connected = connected
        self.__lock = threading.Lock()
        self.__owner = ThreadPoolExecutor(max_workers=1, thread_name_prefix='queued-coordinator')
        self.__monitor = monitor
        self.__owns_monitor = owns_monitor
        if monitor is not None:
            monitor.subscribe(self.on_connectivity_change)

    @property
    def is_connected(self) -> bool:
        with self.__lock:
            return self.__connected

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def handle(self, request: Request, progress: Optional[ProgressCallback] = None) -> bytes:
        """
        Handle a request, with offline support.

        While offline, a previously cached body for the request is returned without any network activity. Otherwise
        the request is executed, and a successful body is cached. A request that fails while offline is queued for a
        single retry on reconnect; the error is raised either way.

        @param request
          The request to handle.
        @param progress
          Receives upload progress as a fraction between 0.0 and 1.0. Only used for multipart uploads.
        @return
          The response body.
        @throws ApiError
          `NetworkUnavailable`, `InvalidResponse`, `ServerError` or `TransportError`.
        """
        return self._dispatch(request, progress, queue_on_failure=True)

    def _dispatch(self, request: Request, progress: Optional[ProgressCallback], queue_on_failure: bool) -> bytes:
        key = fingerprint(request)
        connected = self.is_connected

        if not connected:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info('Offline. Serving {} from cache.'.format(key))
                return cached

        try:
            response = self.transport.execute(request, connected, progress)
        except ApiError as e:
            logger.info('Request to {} failed: {}'.format(key, e.message))
            if queue_on_failure:
                with self.__lock:
                    if not self.__connected:
                        self.pending.append(request)
            raise

        # Uploads hand back the body whatever the status. Only a 200 is worth serving later.
        if response.ok:
            self.cache.put(key, response.body)
        else:
            logger.info('Not caching {}. Status {} is not a success.'.format(key, response.status))
        return response.body

    def on_connectivity_change(self, connected: bool) -> Future:
        """
        Record a connectivity transition. On reconnect, retry every pending request once.

        The transition is processed on the coordinator's owner thread, whatever thread reports it.

        @return
          A future that resolves once the transition, including any drain pass, has been processed.
        """
        return self.__owner.submit(self._update_connection_status, connected)

    def _update_connection_status(self, connected: bool) -> None:
        with self.__lock:
            self.__connected = connected
        if connected:
            self._retry_pending()

    def _retry_pending(self) -> None:
        if not self.is_connected:
            return

        def retry(request: Request) -> None:
            try:
                self._dispatch(request, None, queue_on_failure=False)
                logger.info('Retried {}'.format(request.url))
            except ApiError as e:
                logger.warning('Retry of {} failed: {}'.format(request.url, e.message))
            except Exception:
                # There is no caller to report to, and the rest of the pass must still run.
                logger.exception('Retry of {} failed unexpectedly'.format(request.url))

        self.pending.drain_all(retry)

    def close(self):
        if self.__monitor is not None:
            self.__monitor.unsubscribe(self.on_connectivity_change)
            if self.__owns_monitor:
                self.__monitor.stop()
            self.__monitor = None
        self.__owner.shutdown(wait=True)
        self.transport.close()
        self.cache.close()

    def __enter__(self) -> 'RequestCoordinator':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def create(cache_directory: Optional[Path] = None, probe_host: str = DEFAULT_PROBE_HOST,
           probe_port: int = DEFAULT_PROBE_PORT, interval: float = DEFAULT_PROBE_INTERVAL,
           timeout: float = DEFAULT_PROBE_TIMEOUT) -> RequestCoordinator:
    if cache_directory is None:
        cache = MemoryCache()
    else:
        cache = FileCache(Path(cache_directory), DEFAULT_CACHE_DIRECTORY_LEVELS)
    monitor = SocketMonitor(probe_host, probe_port, interval, timeout)
    coordinator = RequestCoordinator(Transport(), cache, monitor, owns_monitor=True)
    monitor.start()
    return coordinator
