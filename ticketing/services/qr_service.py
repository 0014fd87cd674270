"""
QR code rendering for tickets
"""

import io

import qrcode

class QRService:
    """Service for generating ticket QR codes"""

    @staticmethod
    def render_ticket_qr(qr_code: str, format: str = 'PNG') -> bytes:
        """Render a ticket's QR payload as an image; scanners read the payload back"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(qr_code)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()
