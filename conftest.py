"""
Shared pytest fixtures for the Para Sports ID card tests
"""

import re
import shutil
from pathlib import Path

import pytest
import reportlab
from PIL import Image

from app.core.config import Settings
from app.schemas.player import PlayerRecord
from app.services.card_file_manager import CardFileManager
from app.services.card_generator import ParaSportsCardGenerator
from app.services.qr_service import PlayerQRCodeService

PAGE_OBJECT = re.compile(rb"/Type /Page\b")
IMAGE_PLACEMENT = re.compile(rb"/\S+ Do\b")

# TrueType font bundled with ReportLab
BUNDLED_TTF = Path(reportlab.__file__).resolve().parent / "fonts" / "Vera.ttf"


def count_pdf_pages(pdf_bytes: bytes) -> int:
    return len(PAGE_OBJECT.findall(pdf_bytes))


def count_image_placements(pdf_bytes: bytes) -> int:
    return len(IMAGE_PLACEMENT.findall(pdf_bytes))


def write_logo_assets(settings):
    """Write both logo files into the assets directory"""
    primary = settings.get_asset_path(settings.PRIMARY_LOGO_FILE)
    secondary = settings.get_asset_path(settings.SECONDARY_LOGO_FILE)
    primary.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", (120, 120), (25, 25, 112, 255)).save(primary)
    Image.new("RGB", (120, 160), (255, 140, 0)).save(secondary)
    return primary, secondary


@pytest.fixture
def card_settings(tmp_path):
    """Settings pointing storage and assets at a temporary directory"""
    return Settings(
        FILE_STORAGE_PATH=str(tmp_path / "storage"),
        ASSETS_PATH=str(tmp_path / "assets"),
        IDCARD_RENDER_TIMEOUT_SECONDS=30.0,
    )


@pytest.fixture
def card_assets(card_settings):
    return write_logo_assets(card_settings)


@pytest.fixture
def unicode_font(card_settings):
    """Install a TrueType font at the configured footer font path"""
    font_path = card_settings.get_asset_path(card_settings.UNICODE_FONT_FILE)
    font_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(BUNDLED_TTF, font_path)
    return font_path


@pytest.fixture
def file_manager(card_settings):
    return CardFileManager(card_settings)


@pytest.fixture
def generator(card_settings, file_manager):
    """Generator with uncompressed page streams so drawn text can be searched"""
    return ParaSportsCardGenerator(
        settings=card_settings,
        file_manager=file_manager,
        qr=PlayerQRCodeService(),
        page_compression=False,
    )


@pytest.fixture
def sample_player():
    return PlayerRecord.model_validate({
        "playerId": "PS20250001",
        "firstName": "BHAVANABEN",
        "lastName": "CHAUDHARY",
        "dateOfBirth": "1998-06-01",
        "gender": "FEMALE",
        "passportNumber": "S0738958",
        "primarySport": "JAVELIN",
        "address": {"city": "SURAT", "state": "GUJARAT"},
        "coachName": "VISHESH SHARMA",
        "coachContact": "9876543210",
        "emergencyContact": {"name": "AJABAJI", "relationship": "Father", "phone": "9982200192"},
    })
