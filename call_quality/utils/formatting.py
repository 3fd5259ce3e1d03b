"""
Display helpers for call metrics.
"""

from call_quality.models.call_metrics import Resolution


def format_bitrate(bits_per_second: float) -> str:
    """
    Formats a bitrate for humans.
    
    Examples:
        >>> format_bitrate(2_500_000)
        '2.5 Mbps'
        >>> format_bitrate(640_000)
        '640.0 Kbps'
        >>> format_bitrate(512)
        '512 bps'
    """
    if bits_per_second >= 1_000_000:
        return f'{bits_per_second / 1_000_000:.1f} Mbps'
    if bits_per_second >= 1_000:
        return f'{bits_per_second / 1_000:.1f} Kbps'
    return f'{bits_per_second:.0f} bps'


def format_resolution(resolution: Resolution) -> str:
    """'1280x720', or 'unknown' when no video track reported a size."""
    if not resolution.width or not resolution.height:
        return 'unknown'
    return f'{resolution.width}x{resolution.height}'
