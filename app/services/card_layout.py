"""
Card Layout Primitives for Para Sports ID Card System
Drawing helpers over a ReportLab canvas using top-left layout coordinates
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union, List

from PIL import Image, ImageOps
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

# ---------- CARD CONSTANTS ----------
CARD_W = 650
CARD_H = 400
CARD_RADIUS = 20

LATIN_FONT = "Helvetica"
LATIN_BOLD_FONT = "Helvetica-Bold"

# Colors from the association's card design
COLORS = {
    "bg_start": colors.HexColor("#FFE4B5"),      # Light orange
    "bg_end": colors.HexColor("#B0E0E6"),        # Light blue
    "title": colors.HexColor("#191970"),         # Midnight blue
    "label": colors.HexColor("#1976D2"),
    "value": colors.HexColor("#111111"),
    "banner": colors.HexColor("#000000"),
    "footer_start": colors.HexColor("#FF8C00"),  # Orange
    "footer_end": colors.HexColor("#000080"),    # Dark blue
    "caption": colors.HexColor("#000080"),
    "placeholder": colors.HexColor("#cccccc"),
}

ImageSource = Union[str, Path, Image.Image]


class FontFallback(str, Enum):
    """Whether the script-specific footer font could be registered"""
    UNICODE_AVAILABLE = "unicode_available"
    UNICODE_UNAVAILABLE = "unicode_unavailable"


@dataclass(frozen=True)
class FooterFont:
    """Font used for localized text, decided once when the document opens"""
    state: FontFallback
    font_name: str

    @property
    def is_unicode(self) -> bool:
        return self.state is FontFallback.UNICODE_AVAILABLE


LATIN_ONLY = FooterFont(FontFallback.UNICODE_UNAVAILABLE, LATIN_FONT)


def load_footer_font(font_path: Path) -> FooterFont:
    """Register the bundled Unicode font, falling back to Helvetica when it is missing or unreadable"""
    if not font_path.exists():
        logger.warning(f"Unicode font not found, localized text will use {LATIN_FONT}: {font_path}")
        return LATIN_ONLY

    font_name = font_path.stem
    try:
        if font_name not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        logger.info(f"Registered Unicode font {font_name}: {font_path}")
        return FooterFont(FontFallback.UNICODE_AVAILABLE, font_name)
    except Exception as e:
        logger.error(f"Error registering Unicode font {font_path}: {e}")
        return LATIN_ONLY


def spaced_text(text: str) -> str:
    """Join the characters of text with single spaces"""
    return " ".join(text)


def _open_image(source: ImageSource) -> Image.Image:
    if isinstance(source, Image.Image):
        return source
    with Image.open(source) as img:
        img.load()
        return img.copy()


class CardCanvas:
    """
    Fixed-size card surface.

    Layout coordinates have their origin at the top-left corner of the page,
    with y growing downwards; they are flipped to PDF space on every draw.
    """

    def __init__(self, output, width: float = CARD_W, height: float = CARD_H,
                 title: Optional[str] = None, page_compression: bool = True):
        self.width = width
        self.height = height
        self.canvas = canvas.Canvas(output, pagesize=(width, height),
                                    pageCompression=1 if page_compression else 0)
        if title:
            self.canvas.setTitle(title)
        self.canvas.setAuthor("Para Sports Association of Gujarat")
        self.canvas.setCreator("Para Sports ID Card Service")

    def _pdf_y(self, y: float, h: float = 0) -> float:
        return self.height - y - h

    @contextmanager
    def opacity(self, alpha: float):
        """Apply fill/stroke alpha to everything drawn inside the block"""
        self.canvas.saveState()
        try:
            self.canvas.setFillAlpha(alpha)
            self.canvas.setStrokeAlpha(alpha)
            yield
        finally:
            self.canvas.restoreState()

    @contextmanager
    def clip_rounded_rect(self, x: float, y: float, w: float, h: float, radius: float):
        """Restrict drawing inside the block to a rounded rectangle"""
        self.canvas.saveState()
        try:
            path = self.canvas.beginPath()
            path.roundRect(x, self._pdf_y(y, h), w, h, radius)
            self.canvas.clipPath(path, stroke=0, fill=0)
            yield
        finally:
            self.canvas.restoreState()

    def fill_rect(self, x: float, y: float, w: float, h: float, color) -> None:
        self.canvas.setFillColor(color)
        self.canvas.rect(x, self._pdf_y(y, h), w, h, stroke=0, fill=1)

    def linear_gradient(self, x0: float, y0: float, x1: float, y1: float, start_color, end_color) -> None:
        """Paint a two-stop gradient through the current clip"""
        self.canvas.linearGradient(x0, self._pdf_y(y0), x1, self._pdf_y(y1),
                                   (start_color, end_color), (0, 1), extend=True)

    def rounded_gradient_rect(self, x: float, y: float, w: float, h: float, radius: float,
                              start_color, end_color, opacity: float = 1.0) -> None:
        """Rounded rectangle filled with a diagonal gradient spanning its bounds"""
        with self.opacity(opacity):
            with self.clip_rounded_rect(x, y, w, h, radius):
                self.linear_gradient(x, y, x + w, y + h, start_color, end_color)

    def draw_image(self, source: ImageSource, x: float, y: float, w: float, h: Optional[float] = None,
                   crop_to_fit: bool = False) -> None:
        """
        Place an image stretched to (w, h).

        When h is None the height follows the image aspect ratio. With
        crop_to_fit the image is first center-cropped to the target aspect.
        Raises on unreadable images; callers decide the fallback.
        """
        img = _open_image(source)
        if h is None:
            h = w * img.height / float(img.width)
        if crop_to_fit:
            img = ImageOps.fit(img, (max(int(w * 4), 1), max(int(h * 4), 1)), Image.Resampling.LANCZOS)
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA")
        self.canvas.drawImage(ImageReader(img), x, self._pdf_y(y, h), width=w, height=h, mask="auto")

    def line_height(self, font_name: str, font_size: float) -> float:
        ascent, descent = pdfmetrics.getAscentDescent(font_name, font_size)
        return ascent - descent

    def wrap_lines(self, text: str, font_name: str, font_size: float, width: float) -> List[str]:
        if not text:
            return []
        return simpleSplit(text, font_name, font_size, width) or [text]

    def _line_x(self, line: str, x: float, width: float, font_name: str, font_size: float, align: str) -> float:
        if align == "left":
            return x
        line_width = pdfmetrics.stringWidth(line, font_name, font_size)
        if align == "center":
            return x + (width - line_width) / 2.0
        return x + width - line_width

    def draw_text(self, text: Optional[str], x: float, y: float, width: float,
                  font_name: str = LATIN_FONT, font_size: float = 12, color=colors.black,
                  align: str = "left") -> float:
        """
        Draw text whose first line box starts at (x, y), wrapping within width.

        Returns the height used. Drawing problems are logged, never raised.
        """
        try:
            lines = self.wrap_lines(str(text or ""), font_name, font_size, width)
            ascent, _ = pdfmetrics.getAscentDescent(font_name, font_size)
            leading = self.line_height(font_name, font_size)
            self.canvas.setFont(font_name, font_size)
            self.canvas.setFillColor(color)
            baseline = y + ascent
            for line in lines:
                line_x = self._line_x(line, x, width, font_name, font_size, align)
                self.canvas.drawString(line_x, self._pdf_y(baseline), line)
                baseline += leading
            return leading * len(lines)
        except Exception as e:
            logger.error(f"Text rendering error for {text!r}: {e}")
            return 0

    def draw_gradient_text(self, text: str, x: float, y: float, width: float,
                           font_name: str, font_size: float, start_color, end_color,
                           align: str = "center") -> None:
        """Draw a single line of text filled with a horizontal gradient"""
        try:
            ascent, descent = pdfmetrics.getAscentDescent(font_name, font_size)
            line_x = self._line_x(text, x, width, font_name, font_size, align)
            self.canvas.saveState()
            try:
                # Glyph outlines become the clip path (render mode 7)
                text_obj = self.canvas.beginText()
                text_obj.setTextRenderMode(7)
                text_obj.setFont(font_name, font_size)
                text_obj.setTextOrigin(line_x, self._pdf_y(y + ascent))
                text_obj.textOut(text)
                self.canvas.drawText(text_obj)
                self.linear_gradient(x, y, x + width, y + ascent - descent, start_color, end_color)
            finally:
                self.canvas.restoreState()
        except Exception as e:
            logger.error(f"Gradient text rendering error for {text!r}: {e}")

    def show_page(self) -> None:
        self.canvas.showPage()

    def save(self) -> None:
        self.canvas.save()
