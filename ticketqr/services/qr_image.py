# ticketqr/services/qr_image.py
import base64
import io

import qrcode  # type: ignore
from qrcode.constants import ERROR_CORRECT_H  # type: ignore


def qr_png_bytes(text: str, box_size: int = 10, border: int = 4) -> bytes:
    # nível H: o código continua legível com tela riscada / reflexo
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=box_size, border=border)
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image()
    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue()


def qr_data_uri(text: str) -> str:
    b64 = base64.b64encode(qr_png_bytes(text)).decode("ascii")
    return f"data:image/png;base64,{b64}"
