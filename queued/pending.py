import logging
import threading
from typing import Callable, List

from .model import Request


logger = logging.getLogger(__name__)


class PendingQueue:
    """
    Requests that failed while offline, waiting for one retry.

    Entries are kept in insertion order and are not deduplicated. The queue lives in memory only.
    """

    def __init__(self) -> None:
        self.__entries: List[Request] = []
        self.__lock = threading.Lock()

    def append(self, request: Request) -> None:
        with self.__lock:
            self.__entries.append(request)
            logger.info('Queued {} for retry. {} request(s) pending.'.format(request.url, len(self.__entries)))

    def snapshot(self) -> List[Request]:
        with self.__lock:
            return list(self.__entries)

    def __len__(self) -> int:
        with self.__lock:
            return len(self.__entries)

    def drain_all(self, handler: Callable[[Request], None]) -> None:
        """
        Pass every pending request to `handler` in FIFO order, then forget them.

        The entries are detached before the first call, so the queue is left without them even if `handler` raises.
        Requests appended while the pass runs are kept for the next pass.
        """
        with self.__lock:
            entries, self.__entries = self.__entries, []

        logger.info('Draining {} pending request(s).'.format(len(entries)))
        for request in entries:
            handler(request)
