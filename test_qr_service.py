"""
Tests for the player QR code payload and rasterizer
"""

import pytest

from app.schemas.player import PlayerRecord
from app.services.errors import QRCodeGenerationError
from app.services.qr_service import PlayerQRCodeService, QR_SIZE_PX


@pytest.fixture
def service():
    return PlayerQRCodeService()


def test_full_payload_lines(service, sample_player):
    assert service.build_qr_payload(sample_player).splitlines() == [
        "Player ID: PS20250001",
        "Name: BHAVANABEN CHAUDHARY",
        "DOB: 01/06/1998",
        "Gender: FEMALE",
        "Passport: S0738958",
        "Primary Sport: JAVELIN",
        "Address: SURAT, GUJARAT",
        "Coach: VISHESH SHARMA",
        "Coach Contact: 9876543210",
        "Emergency: AJABAJI (9982200192)",
    ]


def test_payload_tolerates_missing_fields(service):
    lines = service.build_qr_payload(PlayerRecord()).splitlines()
    assert len(lines) == 10
    assert lines[0] == "Player ID: "
    assert lines[-1] == "Emergency:  ()"


def test_payload_values_stay_on_one_line(service):
    player = PlayerRecord(firstName="ANIL\nKUMAR", address={"street": "12 Ring Road\r\nAthwa", "city": "SURAT"})
    payload = service.build_qr_payload(player)
    assert len(payload.splitlines()) == 10
    assert "Name: ANIL KUMAR" in payload.splitlines()
    assert "Address: 12 Ring Road Athwa, SURAT" in payload.splitlines()


def test_payload_keeps_internal_spacing(service):
    player = PlayerRecord(firstName="ANIL  KUMAR", lastName="PATEL", coachName="R.  SHAH",
                          emergencyContact={"name": "MEENA  PATEL", "phone": "99822 00192"})
    fields = service.parse_qr_payload(service.build_qr_payload(player))
    assert fields["Name"] == player.full_name == "ANIL  KUMAR PATEL"
    assert fields["Coach"] == "R.  SHAH"
    assert fields["Emergency Name"] == "MEENA  PATEL"
    assert fields["Emergency Phone"] == "99822 00192"


def test_parse_payload_recovers_fields(service, sample_player):
    fields = service.parse_qr_payload(service.build_qr_payload(sample_player))
    assert fields["Player ID"] == "PS20250001"
    assert fields["Name"] == "BHAVANABEN CHAUDHARY"
    assert fields["Address"] == "SURAT, GUJARAT"
    assert fields["Emergency Name"] == "AJABAJI"
    assert fields["Emergency Phone"] == "9982200192"
    assert "Emergency" not in fields


def test_parse_payload_with_empty_values(service):
    fields = service.parse_qr_payload(service.build_qr_payload(PlayerRecord()))
    assert fields["Player ID"] == ""
    assert fields["Emergency Name"] == ""
    assert fields["Emergency Phone"] == ""


def test_minimal_payload_uses_placeholder(service):
    assert service.build_minimal_payload(PlayerRecord(playerId="PS7")) == "Player ID: PS7"
    assert service.build_minimal_payload(PlayerRecord()) == "Player ID: PS000000"


def test_qr_image_is_fixed_size(service, sample_player):
    image = service.generate_player_qr(sample_player)
    assert image.size == (QR_SIZE_PX, QR_SIZE_PX)
    assert image.mode == "RGB"


def test_oversized_payload_falls_back_to_player_id(service):
    player = PlayerRecord(playerId="PS20250001", address={"street": "x" * 5000})
    encoded = []
    original = service.generate_qr_image

    def recording(text):
        encoded.append(text)
        return original(text)

    service.generate_qr_image = recording
    image = service.generate_player_qr(player)

    assert image.size == (QR_SIZE_PX, QR_SIZE_PX)
    assert encoded[-1] == "Player ID: PS20250001"
    assert len(encoded) == 2


def test_fallback_failure_is_raised(service, sample_player, monkeypatch):
    def fail(text):
        raise ValueError("encoder broken")

    monkeypatch.setattr(service, "generate_qr_image", fail)

    with pytest.raises(QRCodeGenerationError, match="encoder broken"):
        service.generate_player_qr(sample_player)
