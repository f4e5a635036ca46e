"""Structured lifecycle telemetry (JSON-lines event records)."""

from .events import LifecycleEventLog
from .jsonl import append_jsonl, read_jsonl

__all__ = ["LifecycleEventLog", "append_jsonl", "read_jsonl"]
