"""
Core types for StudyFlow.

Exports:
    - ActionResult: Tagged success/failure result of a service action
"""

from .result import ActionResult

__all__ = ["ActionResult"]
