from unittest import TestCase

from queued.model import GetRequest, PostRequest
from queued.pending import PendingQueue


class TestPendingQueue(TestCase):
    def test_drain_in_fifo_order_then_clear(self):
        queue = PendingQueue()
        requests = [GetRequest('http://example.test/1'), PostRequest('http://example.test/2', b'x'),
                    GetRequest('http://example.test/3')]
        for request in requests:
            queue.append(request)

        seen = []
        queue.drain_all(seen.append)

        self.assertEqual(requests, seen)
        self.assertEqual(0, len(queue))

    def test_duplicates_are_kept(self):
        queue = PendingQueue()
        request = GetRequest('http://example.test/1')
        queue.append(request)
        queue.append(request)
        self.assertEqual([request, request], queue.snapshot())

    def test_cleared_even_if_handler_raises(self):
        queue = PendingQueue()
        queue.append(GetRequest('http://example.test/1'))
        queue.append(GetRequest('http://example.test/2'))

        def fail(request):
            raise RuntimeError('boom')

        with self.assertRaises(RuntimeError):
            queue.drain_all(fail)
        self.assertEqual(0, len(queue))

    def test_appends_during_drain_wait_for_next_pass(self):
        queue = PendingQueue()
        queue.append(GetRequest('http://example.test/1'))
        late = GetRequest('http://example.test/late')

        queue.drain_all(lambda request: queue.append(late))

        self.assertEqual([late], queue.snapshot())

    def test_empty_drain(self):
        seen = []
        PendingQueue().drain_all(seen.append)
        self.assertEqual([], seen)
