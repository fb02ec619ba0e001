from __future__ import annotations

import math

COMPACT_SUFFIXES = ["", "K", "M", "B", "T", "Qa", "Qi"]
DATA_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]


def format_number(num: float, decimals: int = 2) -> str:
    """Fixed-point with trailing zeros trimmed; tiny positive values keep 4 places."""
    if 0 < num < 0.01:
        return f"{num:.4f}"
    formatted = f"{num:.{decimals}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    return formatted


def format_compact_number(num: float) -> str:
    if num == 0:
        return "0"
    if 0 < num < 0.01:
        return format_number(num, 4)
    if num < 1000:
        return format_number(num, 2)
    magnitude = min(int(math.floor(math.log10(num) / 3)), len(COMPACT_SUFFIXES) - 1)
    scaled = num / (1000 ** magnitude)
    decimals = 1 if magnitude == 1 else 2
    return f"{format_number(scaled, decimals)}{COMPACT_SUFFIXES[magnitude]}"


def format_data_size(size: float) -> str:
    if size == 0:
        return "0 B"
    if 0 < size < 1:
        return f"{format_number(size, 3)} B"
    if size < 1024:
        return f"{format_number(size, 1)} B"
    magnitude = min(int(math.floor(math.log(size) / math.log(1024))), len(DATA_UNITS) - 1)
    value = size / (1024 ** magnitude)
    if magnitude == 1:
        decimals = 1
    elif magnitude == 2:
        decimals = 2
    else:
        decimals = 3
    return f"{format_number(value, decimals)} {DATA_UNITS[magnitude]}"


def format_duration(ms: float) -> str:
    """m:ss, clamped at zero."""
    total = max(0, int(ms // 1000))
    return f"{total // 60}:{total % 60:02d}"
