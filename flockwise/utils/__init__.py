from .formatting import percentage, round_decimal, safe_ratio

__all__ = ['percentage', 'round_decimal', 'safe_ratio']
