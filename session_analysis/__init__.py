"""Pure session analysis package for huntStats.

This package contains deterministic, testable computations that operate on
in-memory session snapshots and return DTOs. It must not import Django or
perform any I/O.
"""

from .engine import analyze_session

__all__ = ["analyze_session"]
