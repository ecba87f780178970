"""
Player QR Code Service for Para Sports ID Card System
Builds the plain-text player payload and rasterizes it as a QR code
"""

import logging
import re
from typing import Dict, List, Tuple

import qrcode
from PIL import Image

from app.schemas.player import PlayerRecord
from app.services.errors import QRCodeGenerationError

logger = logging.getLogger(__name__)

QR_SIZE_PX = 140

_EMERGENCY_RE = re.compile(r"^(?P<name>.*) \((?P<phone>.*)\)$")
_LINE_BREAKS = re.compile(r"[\r\n]+")


def _clean(value) -> str:
    # Payload is newline-delimited, values must stay on one line
    return _LINE_BREAKS.sub(" ", str(value or ""))


class PlayerQRCodeService:
    """Service for generating the QR code printed on the back of the card"""

    QR_CONFIG = {
        'error_correction': qrcode.constants.ERROR_CORRECT_M,
        'border': 1,
        'box_size': 4,
        'size_px': QR_SIZE_PX,
    }

    def payload_fields(self, player: PlayerRecord) -> List[Tuple[str, str]]:
        """Ordered (label, value) pairs embedded in the QR payload"""
        return [
            ("Player ID", _clean(player.player_id)),
            ("Name", _clean(player.full_name)),
            ("DOB", _clean(player.formatted_date_of_birth)),
            ("Gender", _clean(player.gender)),
            ("Passport", _clean(player.passport_number)),
            ("Primary Sport", _clean(player.primary_sport)),
            ("Address", _clean(player.address_line)),
            ("Coach", _clean(player.coach_name)),
            ("Coach Contact", _clean(player.coach_contact)),
            ("Emergency", f"{_clean(player.emergency_name)} ({_clean(player.emergency_phone)})"),
        ]

    def build_qr_payload(self, player: PlayerRecord) -> str:
        """Line-per-field plain text, readable by any phone notes app"""
        return "\n".join(f"{label}: {value}" for label, value in self.payload_fields(player))

    def build_minimal_payload(self, player: PlayerRecord) -> str:
        return f"Player ID: {_clean(player.display_player_id)}"

    def parse_qr_payload(self, text: str) -> Dict[str, str]:
        """
        Parse a scanned payload back into label -> value.
        The Emergency line is split into Emergency Name and Emergency Phone.
        """
        fields: Dict[str, str] = {}
        for line in text.splitlines():
            label, sep, value = line.partition(": ")
            if not sep:
                # Empty values leave a trailing "label:" on some scanners
                label, value = line.rstrip(":"), ""
            if label == "Emergency":
                match = _EMERGENCY_RE.match(value)
                fields["Emergency Name"] = match.group("name") if match else value
                fields["Emergency Phone"] = match.group("phone") if match else ""
            else:
                fields[label] = value
        return fields

    def generate_qr_image(self, text: str) -> Image.Image:
        """Encode text as a square QR raster at medium error correction"""
        qr = qrcode.QRCode(
            error_correction=self.QR_CONFIG['error_correction'],
            box_size=self.QR_CONFIG['box_size'],
            border=self.QR_CONFIG['border'],
        )
        qr.add_data(text)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        size = self.QR_CONFIG['size_px']
        return image.resize((size, size), Image.Resampling.NEAREST)

    def generate_player_qr(self, player: PlayerRecord) -> Image.Image:
        """
        QR code for the full player payload.

        Falls back once to a player-ID-only payload; a failure of the
        fallback is raised as QRCodeGenerationError.
        """
        try:
            return self.generate_qr_image(self.build_qr_payload(player))
        except Exception as e:
            logger.error(f"QR code generation error for player {player.player_id}: {e}")

        try:
            logger.warning(f"Falling back to player-ID-only QR code for player {player.player_id}")
            return self.generate_qr_image(self.build_minimal_payload(player))
        except Exception as e:
            raise QRCodeGenerationError(f"Failed to generate QR code: {str(e)}") from e


# Global service instance
qr_service = PlayerQRCodeService()
