import math


def format_time(seconds: float) -> str:
    """
    Format a playback position as m:ss for time labels.
    Negative, NaN and infinite values render as 0:00.
    """
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    total_s = int(seconds)
    return f"{total_s // 60}:{total_s % 60:02d}"


def parse_time_to_seconds(time_string: str) -> float:
    """
    Parse mm:ss or mm:ss.xxx into seconds. Anything else yields 0.
    """
    parts = (time_string or "").split(":")
    if len(parts) != 2:
        return 0

    try:
        minutes = int(parts[0])
        seconds = float(parts[1])
    except ValueError:
        return 0

    if math.isnan(seconds):
        return 0
    return minutes * 60 + seconds


def seconds_to_ts(seconds: float) -> str:
    """
    Format seconds as the body of an LRC tag: mm:ss.xx, or mm:ss.xxx when the
    value is not a whole number of centiseconds.
    """
    ms = max(0, round(seconds * 1000))
    m = ms // 60000
    s = (ms // 1000) % 60
    frac = ms % 1000
    if frac % 10 == 0:
        return f"{m:02d}:{s:02d}.{frac // 10:02d}"
    return f"{m:02d}:{s:02d}.{frac:03d}"


def ms_to_seconds(ms: int) -> float:
    return max(0, int(ms)) / 1000.0
