import functools
import inspect
import logging
import time
from typing import Any, Callable


logger = logging.getLogger('skynav')

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _safe_repr(x, maxlen=120):
    try:
        r = repr(x)
    except Exception:
        r = '<repr error>'
    if len(r) > maxlen:
        r = r[:maxlen] + '...'
    return r


def _format_arguments(signature: inspect.Signature, args, kwargs, mask) -> str:
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return ", ".join(_safe_repr(a) for a in args)
    parts = []
    for name, value in bound.arguments.items():
        if name in ("self", "cls"):
            continue
        parts.append(f"{name}={'***' if name in mask else _safe_repr(value)}")
    return ", ".join(parts)


def log_io(level: int = logging.DEBUG, mask: tuple[str, ...] = ()):
    """
    Log entry, exit and elapsed time of the decorated call.

    Arguments named in ``mask`` are logged as ***.
    Exceptions are logged and re-raised.
    """
    def deco(func: Callable):
        qualname = f"{func.__module__}.{func.__qualname__}"
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            enabled = logger.isEnabledFor(level)
            if enabled:
                logger.log(level, "-> %s(%s)", qualname,
                           _format_arguments(signature, args, kwargs, mask))

            t0 = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.exception("Exception in %s", qualname)
                raise
            if enabled:
                dt = (time.perf_counter() - t0) * 1000.0
                logger.log(level, "<- %s [%0.3f ms] = %s", qualname, dt, _safe_repr(result))
            return result
        return wrapper
    return deco


def level_from_name(value: Any, default: int = logging.INFO) -> int:
    """
    Normalise a level name ("debug", " INFO ") or number ("10", 10) to a logging level.
    Unknown values fall back to default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)
        if s.upper() in _VALID_LEVELS:
            return getattr(logging, s.upper())
    return default
