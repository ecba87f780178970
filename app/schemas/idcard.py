"""
ID Card Schemas for Para Sports ID Card System
"""

from pydantic import BaseModel, Field


class IdCardResult(BaseModel):
    """Result of a card generation request"""
    id_card_path: str = Field(..., description="Storage-relative path, e.g. /idcards/idcard_PS20250001_1718000000000.pdf")
    filename: str = Field(..., description="Generated PDF file name")
    player_id: str = Field(..., description="Player ID printed on the card")
    size_bytes: int = Field(..., description="Size of the written PDF")


class IdCardDeleteResponse(BaseModel):
    """Result of deleting a delivered card"""
    filename: str
    deleted: bool
    bytes_freed: int = 0
