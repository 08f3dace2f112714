"""QR codes for invite links."""
import base64
import logging
from io import BytesIO
from urllib.parse import urlencode

import qrcode
from qrcode.exceptions import DataOverflowError

from app.errors import ServerError

logger = logging.getLogger(__name__)

QR_SIZE = 256
QR_BORDER = 4
RESPONSE_PATH = "response/"


def public_response_url(base_url: str, rsvp_id: str) -> str:
    """Absolute invite URL when ``base_url`` is set, else a root-relative one."""
    query = urlencode({"rsvp_id": rsvp_id})
    if base_url:
        return f"{base_url}{RESPONSE_PATH}?{query}"
    return f"/{RESPONSE_PATH}?{query}"


def qr_png(data: str, size: int = QR_SIZE) -> bytes:
    """PNG of ``data`` with medium error correction, at most ``size`` pixels wide."""
    try:
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            border=QR_BORDER,
        )
        qr.add_data(data)
        qr.make(fit=True)
        qr.box_size = max(1, size // (qr.modules_count + 2 * QR_BORDER))
        img = qr.make_image(fill_color="black", back_color="white")

        buffered = BytesIO()
        img.save(buffered, "PNG")
    except (DataOverflowError, OSError, ValueError) as exc:
        logger.error("Failed to generate QR code for %d bytes of data: %s", len(data), exc)
        raise ServerError("Failed to generate QR code") from exc
    return buffered.getvalue()


def qr_png_base64(data: str, size: int = QR_SIZE) -> str:
    return base64.b64encode(qr_png(data, size)).decode("utf-8")
