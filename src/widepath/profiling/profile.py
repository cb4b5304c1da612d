"""
Lightweight timing markers for the widepath pipeline.

Usage:
    from widepath.profiling import profile, perf_marker, enable_profiling, get_profile_results, reset_profile

    enable_profiling(True)

    @profile
    def my_function():
        ...

    @profile("custom_name")
    def my_function():
        ...

    with perf_marker("my_section"):
        ...

    results = get_profile_results()
    # {'my_function': {'count': 1, 'total_ms': 5.2, 'avg_ms': 5.2, 'min_ms': 5.2,
    #                  'max_ms': 5.2, 'parents': {}}}

    reset_profile()

Disabling:
    Setting WIDEPATH_NO_PROFILING=1 (or running under python -O) selects a
    no-op backend at import time: markers do nothing and decorated functions
    are returned unwrapped. Requires a process restart to take effect.
"""

import os
import time
import functools
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

# =============================================================================
# Configuration
# =============================================================================

_PROFILING_DISABLED = (
    os.environ.get('WIDEPATH_NO_PROFILING', '').lower() in ('1', 'true', 'yes')
    or not __debug__
)

_perf = time.perf_counter


# =============================================================================
# NoOp Backend
# =============================================================================

class _NoOpMarker:
    __slots__ = ()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class _NoOpBackend:
    """Backend used when profiling is disabled."""

    enabled = False
    recording = False

    def __init__(self):
        self._marker = _NoOpMarker()

    def clear(self) -> None:
        pass

    def get_results(self) -> Dict[str, Dict[str, Any]]:
        return {}

    def create_perf_marker(self, name: str):
        return self._marker

    def create_profiled_function(self, func: Callable, name: str) -> Callable:
        return func


# =============================================================================
# Python Backend
# =============================================================================

class _Stats:
    __slots__ = ('count', 'total', 'min', 'max', 'parents')

    def __init__(self):
        self.count = 0
        self.total = 0.0
        self.min = float('inf')
        self.max = 0.0
        self.parents: Dict[str, int] = {}

    def add(self, elapsed: float, parent: Optional[str]) -> None:
        self.count += 1
        self.total += elapsed
        self.min = min(self.min, elapsed)
        self.max = max(self.max, elapsed)
        if parent is not None:
            self.parents[parent] = self.parents.get(parent, 0) + 1

    def as_dict(self) -> Dict[str, Any]:
        to_ms = 1000.0
        return {
            'count': self.count,
            'total_ms': round(self.total * to_ms, 3),
            'avg_ms': round(self.total * to_ms / self.count, 3) if self.count else 0.0,
            'min_ms': round(self.min * to_ms, 3) if self.count else 0.0,
            'max_ms': round(self.max * to_ms, 3),
            'parents': dict(self.parents),
        }


class _PerfMarker:
    """Context manager timing one named section."""
    __slots__ = ('_name', '_backend', '_start')

    def __init__(self, name: str, backend: '_PythonBackend'):
        self._name = name
        self._backend = backend
        self._start = 0.0

    def __enter__(self):
        self._backend._push(self._name)
        self._start = _perf()
        return self

    def __exit__(self, *args):
        self._backend._pop(self._name, _perf() - self._start)
        return False


class _PythonBackend:
    """
    Accumulates per-marker statistics as sections close.

    A stack of open section names records which marker each section ran
    inside (its parent).
    """

    enabled = True

    def __init__(self):
        self._stats: Dict[str, _Stats] = {}
        self._stack: List[str] = []
        self.recording = False

    def _push(self, name: str) -> None:
        if self.recording:
            self._stack.append(name)

    def _pop(self, name: str, elapsed: float) -> None:
        if not self._stack or self._stack[-1] != name:
            # Not recording when the section opened, or reset while open
            return
        self._stack.pop()
        parent = self._stack[-1] if self._stack else None
        self._stats.setdefault(name, _Stats()).add(elapsed, parent)

    def clear(self) -> None:
        self._stats.clear()
        self._stack.clear()

    def get_results(self) -> Dict[str, Dict[str, Any]]:
        return {name: stats.as_dict() for name, stats in self._stats.items()}

    def create_perf_marker(self, name: str):
        return _PerfMarker(name, self)

    def create_profiled_function(self, func: Callable, name: str) -> Callable:
        backend = self

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            backend._push(name)
            start = _perf()
            try:
                return func(*args, **kwargs)
            finally:
                backend._pop(name, _perf() - start)

        return wrapper


_backend = _NoOpBackend() if _PROFILING_DISABLED else _PythonBackend()


# =============================================================================
# Public API
# =============================================================================

def enable_profiling(enabled: bool = True) -> None:
    """Start or stop recording markers. No effect if profiling is disabled."""
    if _backend.enabled:
        _backend.recording = enabled


def is_profiling_enabled() -> bool:
    """True while markers are being recorded."""
    return _backend.recording


def reset_profile():
    """Reset all collected profile data."""
    _backend.clear()


def get_profile_results() -> Dict[str, Dict[str, Any]]:
    """
    Marker statistics collected since the last reset.

    Returns:
        Dict mapping marker names to
        {'count', 'total_ms', 'avg_ms', 'min_ms', 'max_ms', 'parents'}
    """
    return _backend.get_results()


def perf_marker(name: Optional[str] = None):
    """Context manager timing a code block under the given name."""
    return _backend.create_perf_marker(name or "unknown")


def profile(name_or_func: Union[str, Callable, None] = None) -> Callable:
    """
    Decorator timing every call of a function.

    Usable bare (@profile) or with a marker name (@profile("name")).
    """
    def decorator(func: Callable) -> Callable:
        marker_name = name_or_func if isinstance(name_or_func, str) else func.__name__
        return _backend.create_profiled_function(func, marker_name)

    if callable(name_or_func):
        return decorator(name_or_func)
    return decorator
