"""
Exceptions raised by the ID card services
"""


class CardServiceError(Exception):
    """Base exception for ID card services"""
    pass


class IdCardGenerationError(CardServiceError):
    """Raised when an ID card document cannot be produced"""
    pass


class QRCodeGenerationError(CardServiceError):
    """Raised when a QR code cannot be rasterized, even with the minimal payload"""
    pass


class CardFileError(CardServiceError):
    """Raised for invalid or missing card files"""
    pass
