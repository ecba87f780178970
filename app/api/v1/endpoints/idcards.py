"""
ID Card API Endpoints for Para Sports ID Card System
Generate, download and clean up player ID card PDFs
"""

import re
import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.schemas.idcard import IdCardResult, IdCardDeleteResponse
from app.schemas.player import PlayerRecord
from app.services.card_generator import ParaSportsCardGenerator, card_generator, get_card_specifications
from app.services.errors import CardFileError, IdCardGenerationError

logger = logging.getLogger(__name__)

router = APIRouter()

_PLAYER_ID_IN_FILENAME = re.compile(r"^idcard_(?P<player_id>.+)_\d+\.pdf$")


def get_card_generator() -> ParaSportsCardGenerator:
    """Card generator dependency"""
    return card_generator


@router.post("/generate", response_model=IdCardResult, summary="Generate Player ID Card")
async def generate_id_card(
    player: PlayerRecord,
    generator: ParaSportsCardGenerator = Depends(get_card_generator)
):
    """
    Generate a two-page ID card PDF for a player

    The card is written to card storage and its storage-relative path is
    returned for the registration record and for email delivery.
    """
    try:
        id_card_path = await generator.generate_id_card(player)
    except IdCardGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    filename = id_card_path.rsplit("/", 1)[-1]
    file_path = generator.file_manager.resolve_card_file(filename)
    return IdCardResult(
        id_card_path=id_card_path,
        filename=filename,
        player_id=player.display_player_id,
        size_bytes=file_path.stat().st_size,
    )


@router.get("/download/{filename}", summary="Download ID Card PDF")
async def download_id_card(
    filename: str,
    generator: ParaSportsCardGenerator = Depends(get_card_generator)
):
    """Download a generated ID card as a PDF attachment"""
    try:
        file_content = generator.file_manager.get_file_content(filename)
    except CardFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not file_content:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ID card file not found")

    player_id = _PLAYER_ID_IN_FILENAME.match(filename).group("player_id")
    return Response(
        content=file_content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="Para_Sports_ID_Card_{player_id}.pdf"',
            "Content-Length": str(len(file_content))
        }
    )


@router.delete("/{filename}", response_model=IdCardDeleteResponse, summary="Delete Delivered ID Card")
async def delete_id_card(
    filename: str,
    generator: ParaSportsCardGenerator = Depends(get_card_generator)
):
    """Remove an ID card file once it has been delivered"""
    try:
        result = generator.file_manager.delete_card_file(filename)
    except CardFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not result["deleted"]:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ID card file not found")
    return IdCardDeleteResponse(**result)


@router.get("/specifications", summary="ID Card Layout Specifications")
async def card_specifications() -> Dict[str, Any]:
    """Card dimensions, coordinates and font sizes"""
    return get_card_specifications()
