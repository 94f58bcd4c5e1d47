def format_duration(time_in_seconds) -> str:
    """Format a second count as e.g. '1h2m3s', '2m3s' or '3s'."""
    time_in_seconds = max(0, int(time_in_seconds))
    hours = time_in_seconds // 3600
    mins = (time_in_seconds % 3600) // 60
    secs = time_in_seconds % 60
    if hours > 0:
        return f"{hours}h{mins}m{secs}s"
    elif mins > 0:
        return f"{mins}m{secs}s"
    return f"{secs}s"
