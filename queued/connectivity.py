"""
Sources of connectivity information.

A monitor reports a boolean on every observed change: `True` when the network is usable, `False` otherwise.
Callbacks run on whatever thread the monitor observes changes on, so subscribers must hand off to their own
execution context before touching shared state.
"""

from abc import ABC, abstractmethod
import logging
import socket
import threading
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


ConnectivityCallback = Callable[[bool], None]


DEFAULT_PROBE_HOST = '1.1.1.1'
DEFAULT_PROBE_PORT = 53
DEFAULT_PROBE_INTERVAL = 5.0
DEFAULT_PROBE_TIMEOUT = 3.0


class ConnectivityMonitor(ABC):
    def __init__(self) -> None:
        self.__subscribers: List[ConnectivityCallback] = []
        self.__lock = threading.Lock()

    def subscribe(self, callback: ConnectivityCallback) -> None:
        with self.__lock:
            self.__subscribers.append(callback)

    def unsubscribe(self, callback: ConnectivityCallback) -> None:
        with self.__lock:
            try:
                self.__subscribers.remove(callback)
            except ValueError:
                logger.info('Callback was not subscribed. Nothing to remove.')

    @property
    def subscriber_count(self) -> int:
        with self.__lock:
            return len(self.__subscribers)

    def _emit(self, connected: bool) -> None:
        with self.__lock:
            subscribers = list(self.__subscribers)
        logger.info('Connectivity changed: {}'.format('connected' if connected else 'disconnected'))
        for callback in subscribers:
            callback(connected)

    @abstractmethod
    def start(self) -> None:
        """
        Begin observing. The first observation is always reported.
        """

    @abstractmethod
    def stop(self) -> None:
        """
        Stop observing. No callbacks are made after this returns.
        """


class ManualMonitor(ConnectivityMonitor):
    """
    A monitor driven by the application, for hosts that learn about connectivity from elsewhere.

    Callbacks run synchronously on the thread calling `set_connected()`.
    """

    def __init__(self) -> None:
        super().__init__()
        self.__running = False

    def start(self) -> None:
        self.__running = True

    def stop(self) -> None:
        self.__running = False

    def set_connected(self, connected: bool) -> None:
        if not self.__running:
            logger.info('Ignoring connectivity report from a stopped monitor.')
            return
        self._emit(connected)


class SocketMonitor(ConnectivityMonitor):
    """
    Polls reachability by opening a TCP connection to a well-known host on a background thread.

    No debouncing is applied: every change between two consecutive probes is reported.
    """

    def __init__(self, host: str = DEFAULT_PROBE_HOST, port: int = DEFAULT_PROBE_PORT,
                 interval: float = DEFAULT_PROBE_INTERVAL, timeout: float = DEFAULT_PROBE_TIMEOUT) -> None:
        super().__init__()
        self.host = host
        self.port = port
        self.interval = interval
        self.timeout = timeout
        self.__stopped = threading.Event()
        self.__thread: Optional[threading.Thread] = None

    def probe(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError:
            return False

    def start(self) -> None:
        if self.__thread is not None:
            return
        self.__stopped.clear()
        self.__thread = threading.Thread(target=self._run, name='queued-connectivity', daemon=True)
        self.__thread.start()

    def stop(self) -> None:
        thread, self.__thread = self.__thread, None
        if thread is None:
            return
        self.__stopped.set()
        if thread is not threading.current_thread():
            thread.join()

    def _run(self) -> None:
        last = None
        while not self.__stopped.is_set():
            status = self.probe()
            if status != last and not self.__stopped.is_set():
                last = status
                try:
                    self._emit(status)
                except Exception:
                    logger.exception('Connectivity subscriber failed.')
            self.__stopped.wait(self.interval)
