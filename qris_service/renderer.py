"""Renders payload strings into PNG QR codes."""

import base64
import io
import logging

import qrcode

from .errors import RenderError

LOG = logging.getLogger("qris_service.renderer")


class QRCodeRenderer:
    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def render(self, payload: str) -> bytes:
        if not payload:
            raise RenderError("Cannot render an empty payload")
        try:
            qr = qrcode.QRCode(
                error_correction=qrcode.constants.ERROR_CORRECT_M,
                box_size=self.box_size,
                border=self.border,
            )
            qr.add_data(payload)
            qr.make(fit=True)
            img = qr.make_image(fill_color="black", back_color="white")
            buffered = io.BytesIO()
            img.save(buffered, format="PNG")
        except Exception as e:
            raise RenderError(f"Failed to render QR image: {e}") from e
        return buffered.getvalue()


def to_data_url(png: bytes) -> str:
    return f"data:image/png;base64,{base64.b64encode(png).decode('ascii')}"
