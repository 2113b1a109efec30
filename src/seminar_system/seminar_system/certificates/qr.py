from __future__ import annotations

import io

import qrcode

from .model import Certificate


def qr_payload(certificate: Certificate) -> str:
    return f"{certificate.certificate_number}|{certificate.verification_code}"


def qr_png(certificate: Certificate, *, box_size: int = 10, border: int = 2) -> bytes:
    """PNG bytes of a QR code a verifier can scan to get number and code."""

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(qr_payload(certificate))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
