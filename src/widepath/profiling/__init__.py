"""
widepath profiling package

Quick usage:
    from widepath.profiling import profile, perf_marker, get_profile_results

    @profile
    def my_function():
        with perf_marker("my_section"):
            ...
"""

from .profile import (
    enable_profiling,
    is_profiling_enabled,
    reset_profile,
    get_profile_results,
    perf_marker,
    profile,
    _PROFILING_DISABLED,
)

__all__ = [
    'enable_profiling',
    'is_profiling_enabled',
    'reset_profile',
    'get_profile_results',
    'perf_marker',
    'profile',
    '_PROFILING_DISABLED',
]
