# warehub/shared/coercion.py
import math
from typing import Any, Optional


def to_number_or_none(value: Any, max_abs: Optional[float] = None) -> Optional[float]:
    """Coerce user input to a number; None when it does not parse or reaches max_abs"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    if max_abs is not None and abs(number) >= max_abs:
        return None
    return number


def text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
