"""
Services package for Para Sports ID Card System
"""

from .card_generator import card_generator, ParaSportsCardGenerator, get_card_specifications
from .card_file_manager import card_file_manager, CardFileManager
from .qr_service import qr_service, PlayerQRCodeService
from .otp_store import otp_store, OTPStore

__all__ = [
    "card_generator",
    "ParaSportsCardGenerator",
    "get_card_specifications",
    "card_file_manager",
    "CardFileManager",
    "qr_service",
    "PlayerQRCodeService",
    "otp_store",
    "OTPStore",
]
