import asyncio
from collections.abc import Awaitable
from typing import TypeVar
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query, Request, Response
from loguru import logger
from pydantic import BaseModel, Field

from app.core.errors import EncodingInvariantViolation, InputError, NotFoundError, ProfileStoreError
from app.core.security import redact_identifier
from app.models.vcard import VCardDocument
from app.services.vcard_service import vcard_service

router = APIRouter(tags=["vcard"])

DISCONNECT_POLL_SECONDS = 0.25

T = TypeVar("T")


class GenerateVCardRequest(BaseModel):
    card_id: str | int | None = Field(default=None, description="Identifier of the card to export")
    include_photo: bool = Field(default=True, description="Embed the card photo inline")


def content_disposition(filename: str) -> str:
    """Attachment header; non-ASCII names also get an RFC 5987 filename*."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    if not ascii_name or ascii_name.startswith("."):
        ascii_name = f"contact{ascii_name or '.vcf'}"
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=UTF-8''{quote(filename)}"
    return header


async def _cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Run ``work`` but cancel it (and its photo fetch) if the client goes away."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling vCard generation")
                task.cancel()
                raise HTTPException(status_code=499, detail="Client closed request")
    finally:
        if not task.done():
            task.cancel()


async def _run_generation(request: Request, card_id: str | int | None, work: Awaitable[T]) -> T:
    try:
        return await _cancel_on_disconnect(request, work)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except EncodingInvariantViolation:
        logger.exception(f"[{redact_identifier(str(card_id))}] Generated vCard violates the encoding grammar")
        raise HTTPException(status_code=500, detail="Failed to encode vCard")


def _document_response(document: VCardDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": content_disposition(document.filename)},
    )


@router.post("/generate-vcard")
async def generate_vcard(payload: GenerateVCardRequest, request: Request) -> Response:
    """Generate the vCard for a card and return it as a download."""
    work = vcard_service.generate(payload.card_id, include_photo=payload.include_photo)
    return _document_response(await _run_generation(request, payload.card_id, work))


@router.get("/cards/{card_id}/vcard")
async def download_vcard(
    card_id: str,
    request: Request,
    include_photo: bool = Query(default=True, description="Embed the card photo inline"),
) -> Response:
    work = vcard_service.generate(card_id, include_photo=include_photo)
    return _document_response(await _run_generation(request, card_id, work))


@router.post("/cards/{card_id}/vcard-url")
async def publish_vcard(
    card_id: str,
    request: Request,
    include_photo: bool = Query(default=True, description="Embed the card photo inline"),
) -> dict[str, str]:
    """Regenerate and store the card's vCard, returning its permanent URL."""
    work = vcard_service.publish(card_id, include_photo=include_photo)
    return {"vcard_url": await _run_generation(request, card_id, work)}


@router.get("/files/cards/{card_id}/{filename}")
async def published_vcard(card_id: str, filename: str, request: Request) -> Response:
    """Serve a previously published vCard file."""
    work = vcard_service.get_published(card_id, filename)
    return _document_response(await _run_generation(request, card_id, work))
