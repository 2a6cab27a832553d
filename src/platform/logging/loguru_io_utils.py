from inspect import getfile, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    MASK,
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


# Matches attrs/pydantic reprs such as email='ada@example.com'
_SENSITIVE_REPR_PATTERN = re.compile(
    r"\b(" + '|'.join(sorted(SENSITIVE_KEYWORDS)) + r")=('[^']*'|\"[^\"]*\")"
)
_MAX_CONTENT_LENGTH = 1000


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    target = getattr(func, '__func__', func)
    try:
        lineno = getsourcelines(target)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(target))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = call_depth_var.get() - 1
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def mask_sensitive(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            key: MASK if key in SENSITIVE_KEYWORDS else mask_sensitive(value)
            for key, value in data.items()
        }
    if isinstance(data, list | tuple):
        return type(data)(mask_sensitive(item) for item in data)
    if data is None or isinstance(data, int | float | bool):
        return data
    try:
        rendered = str(data)
    except Exception:
        return data
    masked = _SENSITIVE_REPR_PATTERN.sub(rf"\1='{MASK}'", rendered)
    return data if masked == rendered else masked


def truncate_content(data: Any) -> Any:
    if isinstance(data, str) and len(data) > _MAX_CONTENT_LENGTH:
        return f'{data[:_MAX_CONTENT_LENGTH]}...(truncated {len(data) - _MAX_CONTENT_LENGTH})'
    return data
