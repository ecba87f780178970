"""
Para Sports ID Card Generation Service
Two-page bilingual athlete ID card rendered straight to PDF with ReportLab
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from PIL import Image

from app.core.config import Settings, get_settings
from app.schemas.player import PlayerRecord
from app.services.card_file_manager import CardFileManager
from app.services.card_layout import (
    CARD_W, CARD_H, CARD_RADIUS, COLORS, LATIN_FONT, LATIN_BOLD_FONT,
    CardCanvas, FooterFont, load_footer_font, spaced_text,
)
from app.services.errors import IdCardGenerationError
from app.services.qr_service import PlayerQRCodeService, qr_service, QR_SIZE_PX

logger = logging.getLogger(__name__)

# Font sizes (in points)
FONT_SIZES = {
    "title": 29,
    "field_label": 13,
    "field_value": 13,
    "banner": 30,
    "footer": 32,
    "caption": 12,
}

# Header: logos at fixed margins, title centered between them
HEADER = {
    "logo_margin": 24,
    "logo_size": 60,
    "right_logo_height": 80,
    "top": 18,
    "title_y": 25,
}

FRONT_COORDINATES = {
    # Rounded square photo, vertically centered on the left
    "photo": (40, (CARD_H - 130) / 2, 130),
    "photo_radius": 16,
    "col1_x": 40 + 130 + 30,
    "col2_x": 40 + 130 + 30 + 220,
    "label_width": 110,
    "value_offset": 115,
    "value_width": 90,
    "full_width_value_width": 300,
    "row_height": 38,
}

BACK_COORDINATES = {
    "section_x": 30,
    "section_y": 160,
    "label_width": 120,
    "value_offset": 130,
    "value_width": 300,
    "row_height": 38,
    "qr": (470, 160, QR_SIZE_PX),
    "qr_caption_gap": 5,
}

SHARED_COORDINATES = {
    "banner_y": 320,
    "footer_y": 350,
    "watermark": (150, 80, 350),
    "background_opacity": 0.85,
    "watermark_opacity": 0.10,
}

# Fields that never share a row with another field
FULL_WIDTH_FIELDS = {"Address"}

QR_CAPTION = "Scan for player details"


class CardRenderState(str, Enum):
    OPENED = "Opened"
    FRONT_DRAWN = "FrontDrawn"
    PAGE_ADVANCED = "PageAdvanced"
    BACK_DRAWN = "BackDrawn"
    FINALIZED = "Finalized"
    FLUSHED = "Flushed"


def layout_profile_rows(fields: List[Tuple[str, str]]) -> List[List[Tuple[str, str]]]:
    """
    Group profile fields into rows of at most two columns.

    Full-width fields always get a row of their own; the fields around
    them keep their order and pair up with their neighbours.
    """
    rows: List[List[Tuple[str, str]]] = []
    pending: List[Tuple[str, str]] = []
    for field in fields:
        if field[0] in FULL_WIDTH_FIELDS:
            if pending:
                rows.append(pending)
                pending = []
            rows.append([field])
            continue
        pending.append(field)
        if len(pending) == 2:
            rows.append(pending)
            pending = []
    if pending:
        rows.append(pending)
    return rows


def profile_fields(player: PlayerRecord) -> List[Tuple[str, str]]:
    """Front-side fields in display order"""
    return [
        ("Name", player.full_name),
        ("DOB", player.formatted_date_of_birth),
        ("Gender", player.gender or ""),
        ("Passport Number", player.passport_number or ""),
        ("Primary Sport", player.primary_sport or ""),
        ("Address", player.address_line),
    ]


def back_fields(player: PlayerRecord) -> List[Tuple[str, str]]:
    """Back-side fields in display order"""
    return [
        ("Coach Name", player.coach_name or ""),
        ("Coach Contact", player.coach_contact or ""),
        ("Emergency Name", player.emergency_name),
        ("Emergency Phone", player.emergency_phone),
    ]


def player_id_banner(player: PlayerRecord) -> str:
    """Letter-spaced player ID shown above the footer"""
    return spaced_text(player.display_player_id)


class ParaSportsCardGenerator:
    """
    Para Sports ID card generator
    Draws the front and back pages and writes the finished PDF to card storage
    """

    def __init__(self, settings: Optional[Settings] = None,
                 file_manager: Optional[CardFileManager] = None,
                 qr: Optional[PlayerQRCodeService] = None,
                 page_compression: bool = True):
        self.settings = settings or get_settings()
        self.file_manager = file_manager or CardFileManager(self.settings)
        self.qr_service = qr or qr_service
        self.page_compression = page_compression
        self.version = "1.0-PSAG"

    @property
    def primary_logo_path(self):
        return self.settings.get_asset_path(self.settings.PRIMARY_LOGO_FILE)

    @property
    def secondary_logo_path(self):
        return self.settings.get_asset_path(self.settings.SECONDARY_LOGO_FILE)

    @property
    def unicode_font_path(self):
        return self.settings.get_asset_path(self.settings.UNICODE_FONT_FILE)

    @property
    def render_timeout(self) -> float:
        return self.settings.IDCARD_RENDER_TIMEOUT_SECONDS

    def open_document(self, output, player: PlayerRecord) -> Tuple[CardCanvas, FooterFont]:
        """Create the card surface and settle the footer font for its lifetime"""
        card = CardCanvas(output, CARD_W, CARD_H,
                          title=f"Para Sports ID Card - {player.display_player_id}",
                          page_compression=self.page_compression)
        footer_font = load_footer_font(self.unicode_font_path)
        return card, footer_font

    # ---------- Shared page elements ----------

    def _draw_background(self, card: CardCanvas) -> None:
        card.rounded_gradient_rect(0, 0, CARD_W, CARD_H, CARD_RADIUS,
                                   COLORS["bg_start"], COLORS["bg_end"],
                                   opacity=SHARED_COORDINATES["background_opacity"])

    def _draw_logo(self, card: CardCanvas, path, x: float, y: float, w: float, h: float, side: str) -> None:
        if not path.exists():
            logger.error(f"{side} logo not found: {path}")
            return
        try:
            card.draw_image(path, x, y, w, h)
        except Exception as e:
            logger.error(f"Logo rendering error ({side}): {e}")

    def _draw_branding(self, card: CardCanvas) -> None:
        margin = HEADER["logo_margin"]
        size = HEADER["logo_size"]
        self._draw_logo(card, self.primary_logo_path, margin, HEADER["top"], size, size, "Left")
        self._draw_logo(card, self.secondary_logo_path, CARD_W - margin - size, HEADER["top"],
                        size, HEADER["right_logo_height"], "Right")

    def _draw_title(self, card: CardCanvas) -> None:
        title_x = HEADER["logo_margin"] + HEADER["logo_size"]
        title_width = CARD_W - 2 * title_x
        card.draw_text(self.settings.CARD_TITLE, title_x + 5, HEADER["title_y"], title_width,
                       font_name=LATIN_BOLD_FONT, font_size=FONT_SIZES["title"],
                       color=COLORS["title"], align="center")

    def _draw_header(self, card: CardCanvas) -> None:
        self._draw_background(card)
        self._draw_branding(card)
        self._draw_title(card)

    def _draw_player_id_banner(self, card: CardCanvas, player: PlayerRecord) -> None:
        card.draw_text(player_id_banner(player), 0, SHARED_COORDINATES["banner_y"], CARD_W,
                       font_name=LATIN_BOLD_FONT, font_size=FONT_SIZES["banner"],
                       color=COLORS["banner"], align="center")

    def _draw_footer(self, card: CardCanvas, footer_font: FooterFont) -> None:
        # Without the Unicode font the glyphs come out wrong, but the card still renders
        card.draw_gradient_text(self.settings.FOOTER_TEXT, 0, SHARED_COORDINATES["footer_y"], CARD_W,
                                footer_font.font_name, FONT_SIZES["footer"],
                                COLORS["footer_start"], COLORS["footer_end"], align="center")

    def _draw_watermark(self, card: CardCanvas) -> None:
        path = self.primary_logo_path
        if not path.exists():
            return
        x, y, width = SHARED_COORDINATES["watermark"]
        try:
            with card.opacity(SHARED_COORDINATES["watermark_opacity"]):
                card.draw_image(path, x, y, width)
        except Exception as e:
            logger.warning(f"Watermark rendering error: {e}")

    def _draw_footer_block(self, card: CardCanvas, player: PlayerRecord, footer_font: FooterFont) -> None:
        self._draw_player_id_banner(card, player)
        self._draw_footer(card, footer_font)
        self._draw_watermark(card)

    def _draw_field(self, card: CardCanvas, label: str, value: str, x: float, y: float,
                    label_width: float, value_offset: float, value_width: float) -> None:
        card.draw_text(f"{label}:", x, y, label_width,
                       font_name=LATIN_BOLD_FONT, font_size=FONT_SIZES["field_label"],
                       color=COLORS["label"])
        card.draw_text(value, x + value_offset, y, value_width,
                       font_name=LATIN_FONT, font_size=FONT_SIZES["field_value"],
                       color=COLORS["value"])

    # ---------- Front ----------

    def _draw_profile_photo(self, card: CardCanvas, player: PlayerRecord) -> bool:
        """Draw the clipped profile photo; returns False when the placeholder was used"""
        x, y, size = FRONT_COORDINATES["photo"]
        with card.clip_rounded_rect(x, y, size, size, FRONT_COORDINATES["photo_radius"]):
            photo_path = self.file_manager.resolve_photo_path(player.profile_photo)
            if photo_path:
                try:
                    card.draw_image(photo_path, x, y, size, size, crop_to_fit=True)
                    return True
                except Exception as e:
                    logger.warning(f"Failed to process photo {photo_path}: {e}")
            card.fill_rect(x, y, size, size, COLORS["placeholder"])
            return False

    def _draw_profile_fields(self, card: CardCanvas, player: PlayerRecord) -> None:
        coords = FRONT_COORDINATES
        y = coords["photo"][1]
        for row in layout_profile_rows(profile_fields(player)):
            if row[0][0] in FULL_WIDTH_FIELDS:
                label, value = row[0]
                self._draw_field(card, label, value, coords["col1_x"], y, coords["label_width"],
                                 coords["value_offset"], coords["full_width_value_width"])
            else:
                for column_x, (label, value) in zip((coords["col1_x"], coords["col2_x"]), row):
                    self._draw_field(card, label, value, column_x, y, coords["label_width"],
                                     coords["value_offset"], coords["value_width"])
            y += coords["row_height"]

    def draw_front(self, card: CardCanvas, player: PlayerRecord, footer_font: FooterFont) -> None:
        """Render page 1: branding, photo, profile grid, banner, footer, watermark"""
        self._draw_header(card)
        self._draw_profile_photo(card, player)
        self._draw_profile_fields(card, player)
        self._draw_footer_block(card, player, footer_font)

    # ---------- Back ----------

    def _draw_back_fields(self, card: CardCanvas, player: PlayerRecord) -> None:
        coords = BACK_COORDINATES
        y = coords["section_y"]
        for label, value in back_fields(player):
            self._draw_field(card, label, value, coords["section_x"], y, coords["label_width"],
                             coords["value_offset"], coords["value_width"])
            y += coords["row_height"]

    def _draw_qr_code(self, card: CardCanvas, qr_image: Image.Image) -> None:
        x, y, size = BACK_COORDINATES["qr"]
        card.draw_image(qr_image, x, y, size, size)
        card.draw_text(QR_CAPTION, x, y + size + BACK_COORDINATES["qr_caption_gap"], size,
                       font_name=LATIN_BOLD_FONT, font_size=FONT_SIZES["caption"],
                       color=COLORS["caption"], align="center")

    async def draw_back(self, card: CardCanvas, player: PlayerRecord, footer_font: FooterFont) -> None:
        """Render page 2: branding, coach/emergency column, QR code, banner, footer, watermark"""
        self._draw_header(card)
        self._draw_back_fields(card, player)
        qr_image = await asyncio.wait_for(
            asyncio.to_thread(self.qr_service.generate_player_qr, player),
            timeout=self.render_timeout,
        )
        self._draw_qr_code(card, qr_image)
        self._draw_footer_block(card, player, footer_font)

    # ---------- Document ----------

    async def generate_id_card(self, player: PlayerRecord) -> str:
        """
        Generate the two-page ID card for a player

        Args:
            player: Player record; every field may be empty

        Returns:
            Storage-relative path of the written PDF, e.g. /idcards/idcard_PS20250001_1718000000000.pdf

        Raises:
            IdCardGenerationError: when the document cannot be opened, rendered or written
        """
        player_id = player.display_player_id
        state = "NotOpened"
        logger.info(f"Starting ID card generation for player: {player_id}")

        try:
            with self.file_manager.create_card_file(player_id) as (file_path, handle):
                card, footer_font = self.open_document(handle, player)
                state = CardRenderState.OPENED.value
                logger.info(f"Footer font for {file_path.name}: {footer_font.state.value}")

                self.draw_front(card, player, footer_font)
                state = CardRenderState.FRONT_DRAWN.value

                card.show_page()
                state = CardRenderState.PAGE_ADVANCED.value

                await self.draw_back(card, player, footer_font)
                state = CardRenderState.BACK_DRAWN.value

                await asyncio.wait_for(asyncio.to_thread(card.save), timeout=self.render_timeout)
                state = CardRenderState.FINALIZED.value

                await asyncio.wait_for(asyncio.to_thread(self.file_manager.sync_card_file, handle),
                                       timeout=self.render_timeout)
                state = CardRenderState.FLUSHED.value

        except asyncio.TimeoutError as e:
            logger.error(f"ID card generation timed out for player {player_id} after state {state}")
            raise IdCardGenerationError(
                f"Failed to generate ID card: timed out after {self.render_timeout}s"
            ) from e
        except Exception as e:
            logger.error(f"Error generating ID card for player {player_id} after state {state}: {e}")
            raise IdCardGenerationError(f"Failed to generate ID card: {str(e)}") from e

        logger.info(f"ID card generated successfully: {file_path.name}")
        return self.file_manager.storage_path(file_path)


def get_card_specifications() -> Dict[str, Any]:
    """Get ID card dimensions, coordinates and font sizes"""
    return {
        "dimensions": {
            "width": CARD_W,
            "height": CARD_H,
            "corner_radius": CARD_RADIUS,
        },
        "header": HEADER,
        "front_coordinates": FRONT_COORDINATES,
        "back_coordinates": BACK_COORDINATES,
        "shared_coordinates": SHARED_COORDINATES,
        "font_sizes": FONT_SIZES,
    }


# Service instance for dependency injection
card_generator = ParaSportsCardGenerator()
