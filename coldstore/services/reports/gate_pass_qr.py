# coldstore/services/reports/gate_pass_qr.py
import base64
import json
from io import BytesIO

import qrcode
from PIL import Image, ImageDraw, ImageFont


def qr_payload(gate_pass_id, gate_pass_no, kind):
    """Text encoded in a slip's QR code; enough to look the voucher up again."""
    return json.dumps({"id": gate_pass_id, "gatePassNo": gate_pass_no, "type": kind}, separators=(",", ":"))


# 🧾 Gate pass QR with its voucher label printed underneath
def gate_pass_qr_image(payload, label=None, box_size=6):
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=2,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGB")

    if not label:
        return qr_img

    qr_width, qr_height = qr_img.size
    final_img = Image.new("RGB", (qr_width, qr_height + 30), "white")
    final_img.paste(qr_img, (0, 0))

    draw = ImageDraw.Draw(final_img)
    font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), label, font=font)
    text_width = bbox[2] - bbox[0]
    draw.text(((qr_width - text_width) // 2, qr_height + 8), label, fill="black", font=font)
    return final_img


def gate_pass_qr_png(payload, label=None):
    buffer = BytesIO()
    gate_pass_qr_image(payload, label).save(buffer, format="PNG")
    return buffer.getvalue()


def gate_pass_qr_data_uri(payload, label=None):
    qr_base64 = base64.b64encode(gate_pass_qr_png(payload, label)).decode("utf-8")
    return f"data:image/png;base64,{qr_base64}"
