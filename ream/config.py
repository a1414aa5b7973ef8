from __future__ import annotations
import os

# Defaults
DEFAULT_STACK_SIZE = 1024

_TRUTHY = {'1', 'true', 'yes', 'on'}


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{var} must be positive, got {value}")
    return value


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def get_stack_size() -> int:
    """Capacity of the VM value stack (REAM_STACK_SIZE)."""
    return int_from_env('REAM_STACK_SIZE', DEFAULT_STACK_SIZE)


def trace_enabled() -> bool:
    """Whether the VM traces each step by default (REAM_TRACE)."""
    return flag_from_env('REAM_TRACE')
