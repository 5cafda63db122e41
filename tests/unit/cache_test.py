from ddt import ddt, data, unpack
from pathlib import Path
from tempfile import TemporaryDirectory
import threading
from unittest import TestCase

from queued.cache import FileCache, MemoryCache


@ddt
class TestFileCache(TestCase):
    @data(
        (0, Path('3cbd9c8f1a1ae6f6b5b3fd41d2e2f2bf5d2a18e5d6c5dbc67c9a0ed97d4bc2d7')),
        (5, Path('3', 'c', 'b', 'd', '9', 'c8f1a1ae6f6b5b3fd41d2e2f2bf5d2a18e5d6c5dbc67c9a0ed97d4bc2d7')),
    )
    @unpack
    def test_split_path(self, levels, expected):
        cache = FileCache(Path('unused'), levels)
        self.assertEqual(expected, cache._split_path(
            '3cbd9c8f1a1ae6f6b5b3fd41d2e2f2bf5d2a18e5d6c5dbc67c9a0ed97d4bc2d7'))

    def test_miss(self):
        with TemporaryDirectory() as directory:
            cache = FileCache(Path(directory), 5)
            self.assertIs(None, cache.get('http://example.test/items'))

    def test_put_then_get(self):
        with TemporaryDirectory() as directory:
            cache = FileCache(Path(directory), 5)
            cache.put('http://example.test/items', b'[1, 2]')
            self.assertEqual(b'[1, 2]', cache.get('http://example.test/items'))

    def test_entries_survive_a_new_instance(self):
        with TemporaryDirectory() as directory:
            FileCache(Path(directory), 2).put('http://example.test/items', b'kept')
            self.assertEqual(b'kept', FileCache(Path(directory), 2).get('http://example.test/items'))

    def test_put_overwrites(self):
        with TemporaryDirectory() as directory:
            cache = FileCache(Path(directory), 5)
            cache.put('http://example.test/items', b'old')
            cache.put('http://example.test/items', b'new')
            self.assertEqual(b'new', cache.get('http://example.test/items'))

    def test_entry_is_stored_under_hashed_path(self):
        with TemporaryDirectory() as directory:
            directory = Path(directory)
            cache = FileCache(directory, 5)
            cache.put('http://example.test/items', b'data')

            expected_path = directory / 'entries' / cache._get_path('http://example.test/items')
            self.assertTrue(expected_path.exists(), 'The cache should create the file for the cache entry')
            self.assertEqual(6, len(expected_path.relative_to(directory / 'entries').parts))
            self.assertEqual([], list((directory / 'tmp').iterdir()), 'No temporary files should be left behind')

    def test_failed_write_leaves_no_temporary_file(self):
        with TemporaryDirectory() as directory:
            directory = Path(directory)
            cache = FileCache(directory, 5)

            with self.assertRaises(TypeError):
                # Not bytes, so writing the temporary file fails part way through `put`.
                cache.put('http://example.test/items', 'text')

            self.assertEqual([], list((directory / 'tmp').iterdir()))
            self.assertIs(None, cache.get('http://example.test/items'))

    def test_delete(self):
        with TemporaryDirectory() as directory:
            cache = FileCache(Path(directory), 5)
            cache.put('http://example.test/items', b'data')
            cache.delete('http://example.test/items')
            self.assertIs(None, cache.get('http://example.test/items'))

    def test_delete_missing_entry(self):
        with TemporaryDirectory() as directory:
            FileCache(Path(directory), 5).delete('http://example.test/items')

    def test_concurrent_writers_leave_one_complete_entry(self):
        with TemporaryDirectory() as directory:
            cache = FileCache(Path(directory), 5)
            bodies = [bytes([i]) * 4096 for i in range(8)]
            threads = [threading.Thread(target=cache.put, args=('http://example.test/items', body))
                       for body in bodies]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            self.assertIn(cache.get('http://example.test/items'), bodies)


class TestMemoryCache(TestCase):
    def test_put_get_delete(self):
        cache = MemoryCache()
        self.assertIs(None, cache.get('k'))

        cache.put('k', b'v1')
        cache.put('k', b'v2')
        self.assertEqual(b'v2', cache.get('k'))
        self.assertEqual(1, len(cache))

        cache.delete('k')
        cache.delete('k')
        self.assertIs(None, cache.get('k'))
