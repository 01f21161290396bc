# accounts-api/backend/accounts/mfa/qr.py
import base64
import io

import qrcode
from qrcode.exceptions import DataOverflowError

from ..errors import EncodingTooLarge

# 4 px por módulo; borda padrão de 4 módulos (quiet zone)
QR_BOX_SIZE = 4
QR_BORDER = 4


def encode_qr(text: str) -> bytes:
    """
    Renderiza `text` como QR code (correção de erro L) e devolve o PNG.
    Mesma entrada => mesmos bytes.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise EncodingTooLarge(f"Texto com {len(text)} caracteres não cabe em um QR code") from e

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def encode_qr_base64(text: str) -> str:
    return base64.b64encode(encode_qr(text)).decode("ascii")
