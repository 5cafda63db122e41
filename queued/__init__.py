"""
A connectivity-aware HTTP request manager.

Successful responses are cached and served while offline, and requests that fail while offline are retried once
connectivity returns. See `queued.coordinator.RequestCoordinator`.
"""
