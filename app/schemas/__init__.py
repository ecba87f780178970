"""
Pydantic schemas for request/response validation
"""

# Player schemas
from app.schemas.player import (
    PlayerRecord, Address, EmergencyContact, PLACEHOLDER_PLAYER_ID, format_date
)

# ID card schemas
from app.schemas.idcard import IdCardResult, IdCardDeleteResponse
