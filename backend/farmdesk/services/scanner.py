"""
QR scan loop for trace codes.

Camera access stays with the caller: a kiosk or handheld integration passes
its frame iterator and a decoder (for example a pyzbar wrapper) and gets back
a code ready for farmdesk.services.traceability.lookup.
"""
from typing import Any, Callable, Iterable, Optional

from farmdesk.core.logging import trace_logger
from farmdesk.services.traceability import parse_trace_code

Decoder = Callable[[Any], Optional[str]]


def scan_stream(
    stream: Iterable[Any],
    decode: Decoder,
    cancelled: Callable[[], bool] = lambda: False,
) -> Optional[str]:
    """Pull frames until one decodes to a trace code.

    Returns the code, or None when the scan is cancelled or the stream runs
    dry. Frames that decode to something other than a trace code are
    skipped. The stream's ``close()`` is always called on the way out.
    """
    try:
        for frame in stream:
            if cancelled():
                trace_logger.debug("Scan cancelled")
                return None
            text = decode(frame)
            if text and parse_trace_code(text) is not None:
                return text.strip()
        return None
    finally:
        close = getattr(stream, "close", None)
        if close is not None:
            close()
