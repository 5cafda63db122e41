from mockito import when, unstub
import socket
import threading
from unittest import TestCase

from queued.connectivity import ManualMonitor, SocketMonitor


class TestManualMonitor(TestCase):
    def test_reports_to_subscribers(self):
        monitor = ManualMonitor()
        seen = []
        monitor.subscribe(seen.append)
        monitor.start()

        monitor.set_connected(True)
        monitor.set_connected(False)

        self.assertEqual([True, False], seen)

    def test_stopped_monitor_is_silent(self):
        monitor = ManualMonitor()
        seen = []
        monitor.subscribe(seen.append)

        monitor.set_connected(True)

        self.assertEqual([], seen)

    def test_unsubscribe(self):
        monitor = ManualMonitor()
        seen = []
        monitor.subscribe(seen.append)
        monitor.start()
        monitor.unsubscribe(seen.append)
        monitor.unsubscribe(seen.append)

        monitor.set_connected(True)

        self.assertEqual([], seen)
        self.assertEqual(0, monitor.subscriber_count)


class TestSocketMonitor(TestCase):
    def tearDown(self):
        unstub()

    def test_reports_first_observation_and_changes_only(self):
        monitor = SocketMonitor(interval=0.01)
        when(monitor).probe().thenReturn(False).thenReturn(False).thenReturn(True).thenReturn(True)

        seen = []
        changed = threading.Event()

        def record(connected):
            seen.append(connected)
            if len(seen) == 2:
                changed.set()

        monitor.subscribe(record)
        monitor.start()
        try:
            self.assertTrue(changed.wait(5), 'The monitor should report the change')
        finally:
            monitor.stop()

        self.assertEqual([False, True], seen)

    def test_failing_subscriber_does_not_stop_monitoring(self):
        monitor = SocketMonitor(interval=0.01)
        when(monitor).probe().thenReturn(True).thenReturn(False)

        reported = threading.Event()

        def fail(connected):
            if not connected:
                reported.set()
            raise RuntimeError('boom')

        monitor.subscribe(fail)
        monitor.start()
        try:
            self.assertTrue(reported.wait(5))
        finally:
            monitor.stop()

    def test_probe_failure_means_disconnected(self):
        monitor = SocketMonitor(host='127.0.0.1', port=9, timeout=0.5)
        when(socket).create_connection(...).thenRaise(OSError('unreachable'))

        self.assertFalse(monitor.probe())

    def test_stop_without_start(self):
        SocketMonitor().stop()
