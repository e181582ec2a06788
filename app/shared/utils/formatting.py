"""Human-readable formatting helpers."""


def format_size(num_bytes: int) -> str:
    """Format a byte count as B, KB or MB (one decimal for KB/MB).

    >>> format_size(512)
    '512 B'
    >>> format_size(20 * 1024 * 1024)
    '20.0 MB'
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"
