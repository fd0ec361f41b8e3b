"""Operation counters for calls to external collaborators.

Each component gets a named ``Monitor`` and wraps its external calls with
``increment`` followed by ``track_success``, ``track_failure`` or
``track_error``. The counters are exposed through the health endpoint.

Example:
    ```python
    from portfolio.core.monitoring import setup_monitoring

    monitoring = setup_monitoring('store')
    monitoring.increment('insert')
    monitoring.track_success('insert')
    ```
"""
import threading
from collections import Counter
from typing import Dict, Optional

from portfolio.core.logging import setup_logging

logger = setup_logging('monitoring')

_monitors: Dict[str, 'Monitor'] = {}
_registry_lock = threading.Lock()


class Monitor:
    """Per-component counters of attempts, successes, failures and errors.

    Attributes:
        component: Name of the monitored component
        last_error: Most recent error message per operation
    """

    def __init__(self, component: str):
        self.component = component
        self._lock = threading.Lock()
        self._counters: Dict[str, Counter] = {
            'calls': Counter(),
            'successes': Counter(),
            'failures': Counter(),
            'errors': Counter(),
        }
        self.last_error: Dict[str, str] = {}

    def increment(self, operation: str):
        with self._lock:
            self._counters['calls'][operation] += 1

    def track_success(self, operation: str):
        with self._lock:
            self._counters['successes'][operation] += 1

    def track_failure(self, operation: str):
        """Record an expected, non-exceptional failure (e.g. bad credentials)."""
        with self._lock:
            self._counters['failures'][operation] += 1

    def track_error(self, operation: str, message: str):
        with self._lock:
            self._counters['errors'][operation] += 1
            self.last_error[operation] = message
        logger.debug(f"{self.component}.{operation} error: {message}")

    def count(self, kind: str, operation: str) -> int:
        with self._lock:
            return self._counters[kind][operation]

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Return a copy of all counters keyed by kind then operation."""
        with self._lock:
            return {kind: dict(counter) for kind, counter in self._counters.items()}

    def reset(self):
        with self._lock:
            for counter in self._counters.values():
                counter.clear()
            self.last_error.clear()


def setup_monitoring(component: str) -> Monitor:
    """Get or create the monitor for a component."""
    with _registry_lock:
        monitor = _monitors.get(component)
        if monitor is None:
            monitor = Monitor(component)
            _monitors[component] = monitor
        return monitor


def get_all_monitors(component: Optional[str] = None) -> Dict[str, Dict[str, Dict[str, int]]]:
    """Snapshot every registered monitor, or just one component's."""
    with _registry_lock:
        monitors = dict(_monitors)
    if component is not None:
        monitors = {k: v for k, v in monitors.items() if k == component}
    return {name: monitor.snapshot() for name, monitor in monitors.items()}
