"""
Player Schemas for Para Sports ID Card System
Read-only player record handed to the card generator by the registration store
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union
from datetime import datetime, date


PLACEHOLDER_PLAYER_ID = "PS000000"


def format_date(date_val) -> str:
    """Format a date for display as DD/MM/YYYY, returning unparseable strings unchanged"""
    if isinstance(date_val, datetime):
        return date_val.strftime('%d/%m/%Y')
    elif isinstance(date_val, date):
        return date_val.strftime('%d/%m/%Y')
    elif isinstance(date_val, str) and date_val.strip():
        value = date_val.strip()
        try:
            # ISO datetime format
            if 'T' in value:
                parsed_date = datetime.fromisoformat(value.replace('Z', '+00:00'))
                return parsed_date.strftime('%d/%m/%Y')
            # ISO date format (YYYY-MM-DD)
            if len(value) == 10 and value.count('-') == 2:
                parsed_date = datetime.strptime(value, '%Y-%m-%d')
                return parsed_date.strftime('%d/%m/%Y')
        except ValueError:
            pass
        return value
    return ""


class CardModel(BaseModel):
    """Base model accepting both camelCase wire names and snake_case names"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class Address(CardModel):
    street: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = Field(None, description="City")
    state: Optional[str] = Field(None, description="State")
    postal_code: Optional[str] = Field(None, alias="postalCode", description="Postal code")
    country: Optional[str] = Field(None, description="Country")

    def to_line(self) -> str:
        """Street, city, state and postal code joined with commas, skipping blanks"""
        parts = [self.street, self.city, self.state, self.postal_code]
        return ", ".join(part for part in parts if part)


class EmergencyContact(CardModel):
    name: Optional[str] = Field(None, description="Emergency contact name")
    relationship: Optional[str] = Field(None, description="Relationship to the player")
    phone: Optional[str] = Field(None, description="Emergency contact phone")


class PlayerRecord(CardModel):
    """
    Player data rendered onto the ID card.
    Every field is optional so a card can always be produced.
    """

    # Identity
    player_id: Optional[str] = Field(None, alias="playerId", description="Display player ID, e.g. PS20250001")
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    date_of_birth: Optional[Union[datetime, date, str]] = Field(None, alias="dateOfBirth")
    gender: Optional[str] = None
    passport_number: Optional[str] = Field(None, alias="passportNumber")
    email: Optional[str] = None
    phone: Optional[str] = None

    # Sports classification
    primary_sport: Optional[str] = Field(None, alias="primarySport")
    secondary_sport: Optional[str] = Field(None, alias="secondarySport")

    # Disability classification (stored, not rendered on the card)
    disability_type: Optional[str] = Field(None, alias="disabilityType")
    disability_classification: Optional[str] = Field(None, alias="disabilityClassification")
    impairment_description: Optional[str] = Field(None, alias="impairmentDescription")

    address: Optional[Address] = None
    profile_photo: Optional[str] = Field(None, alias="profilePhoto", description="Path to the uploaded profile photo")

    # Coaching and emergency contact
    coach_name: Optional[str] = Field(None, alias="coachName")
    coach_contact: Optional[str] = Field(None, alias="coachContact")
    emergency_contact: Optional[EmergencyContact] = Field(None, alias="emergencyContact")

    @property
    def display_player_id(self) -> str:
        return self.player_id or PLACEHOLDER_PLAYER_ID

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def formatted_date_of_birth(self) -> str:
        return format_date(self.date_of_birth)

    @property
    def address_line(self) -> str:
        return self.address.to_line() if self.address else ""

    @property
    def emergency_name(self) -> str:
        return (self.emergency_contact.name or "") if self.emergency_contact else ""

    @property
    def emergency_phone(self) -> str:
        return (self.emergency_contact.phone or "") if self.emergency_contact else ""
