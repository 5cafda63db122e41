from abc import ABC, abstractmethod
import hashlib
import logging
import os
from pathlib import Path
import tempfile
import threading
from typing import Dict, Optional
from .util import clamp


logger = logging.getLogger(__name__)


class Cache(ABC):
    """
    An abstraction of a response cache.

    A response cache has a deliberately narrow scope: remember the last good response body for a request fingerprint
    so it can be served while offline. It performs no validation, expiry or eviction. Any capacity limit belongs to the
    underlying storage.

    Implementations must tolerate concurrent writers. The last write for a fingerprint wins.
    """

    @abstractmethod
    def get(self, fingerprint: str) -> Optional[bytes]:
        """
        Retrieve the cached body for `fingerprint`.

        @param fingerprint
          The identity of the request to look up.
        @return
          The cached body, or `None` if there is none.
        """

    @abstractmethod
    def put(self, fingerprint: str, data: bytes) -> None:
        """
        Store a body for `fingerprint`, replacing any previous one.
        """

    @abstractmethod
    def delete(self, fingerprint: str) -> None:
        """
        Delete the body for `fingerprint`, if any.
        """

    def close(self):
        """
        Close any resources associated with the cache.
        """


class MemoryCache(Cache):
    """
    A cache that lives only as long as the process.
    """

    def __init__(self) -> None:
        self.__entries: Dict[str, bytes] = {}
        self.__lock = threading.Lock()

    def get(self, fingerprint: str) -> Optional[bytes]:
        with self.__lock:
            return self.__entries.get(fingerprint)

    def put(self, fingerprint: str, data: bytes) -> None:
        with self.__lock:
            self.__entries[fingerprint] = bytes(data)

    def delete(self, fingerprint: str) -> None:
        with self.__lock:
            self.__entries.pop(fingerprint, None)

    def __len__(self) -> int:
        with self.__lock:
            return len(self.__entries)


class FileCache(Cache):
    def __init__(self, directory: Path, cache_directory_levels: int) -> None:
        """
        Initialize the file cache.

        @param directory
          The path to the root directory of the cache.
        @param cache_directory_levels
          The number of subdirectory levels to use in the cache directory. This
          will be clamped to be between 0 and 20, respectively.
        """
        self.__directory = Path(directory)
        self.__entry_directory = self.__directory / 'entries'
        self.__temp_directory = self.__directory / 'tmp'
        self.__cache_directory_levels = clamp(cache_directory_levels, 0, 20)

    def _get_path(self, fingerprint: str) -> Path:
        hashed = hashlib.sha256(fingerprint.encode('utf-8')).hexdigest()
        return self._split_path(hashed)

    def _split_path(self, path: str) -> Path:
        subdirectories = (list(path[:self.__cache_directory_levels])
                          + [path[self.__cache_directory_levels:]])
        return Path(*subdirectories)

    def get(self, fingerprint: str) -> Optional[bytes]:
        entry_path = self.__entry_directory / self._get_path(fingerprint)
        try:
            logger.info('Looking at the file system for a cache entry for {}'.format(fingerprint))
            with open(entry_path, 'rb') as f:
                return f.read()
        except FileNotFoundError:
            logger.info('No matching cache entry found.')
            return None
        except OSError:
            logger.warning('Unable to read the cache entry at {}. Treating it as a miss.'.format(entry_path))
            return None

    def put(self, fingerprint: str, data: bytes) -> None:
        entry_path = self.__entry_directory / self._get_path(fingerprint)
        entry_path.parent.mkdir(parents=True, exist_ok=True)
        self.__temp_directory.mkdir(parents=True, exist_ok=True)

        # Write aside and move into place so that readers never observe a partial entry, and concurrent writers
        # resolve to whichever moved last.
        f = tempfile.NamedTemporaryFile(mode='wb', dir=str(self.__temp_directory), delete=False)
        temp_path = Path(f.name)
        try:
            with f:
                f.write(data)
            logger.info('Moving new cache entry into place at {}'.format(entry_path))
            os.replace(str(temp_path), str(entry_path))
        except BaseException:
            logger.warning('Failed to store the cache entry for {}. Removing {}'.format(fingerprint, temp_path))
            try:
                temp_path.unlink()
            except FileNotFoundError:
                pass
            raise

    def delete(self, fingerprint: str) -> None:
        entry_path = self.__entry_directory / self._get_path(fingerprint)
        try:
            logger.info('Deleting {}'.format(entry_path))
            entry_path.unlink()
        except FileNotFoundError:
            logger.info('No matching cache entry found. Nothing to delete.')
