from .scanner import scan_stream

__all__ = ["scan_stream"]
