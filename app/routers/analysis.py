# =============================================================================
# app/routers/analysis.py - AI Helper Endpoints
# =============================================================================
# Stateless helpers used by the web client:
#
#   POST /analyze-request    {userText}     -> domain + extracted info
#   POST /analyze-image      {imageData}    -> reusable style description
#   POST /extract-text       {imageData}    -> positioned text blocks
#   POST /transcribe-audio   {audioBase64}  -> transcript
#
# Agent errors keep their code; provider 429 / 402 reach the client as is.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from app.dependencies import ImageAnalystDep, RequestAnalystDep, TextExtractorDep
from app.exceptions import to_api_exception
from core.models.analysis import (
    AnalyzeRequest,
    AnalyzeResponse,
    ExtractTextResponse,
    ImageDataRequest,
    ImageDescriptionResponse,
    TranscribeRequest,
    TranscriptionResponse,
)
from lib.transcription import transcribe_audio
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze-request", response_model=AnalyzeResponse)
def analyze_request(
    request: AnalyzeRequest,
    analyst: RequestAnalystDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Detect the poster domain and pull titles, dates, prices and contacts
    out of a free-text request.

    When the AI gateway is down the response carries a keyword-based
    analysis and `warning`.
    """
    try:
        return analyst.analyze(request.user_text)
    except ApplicationError as e:
        raise to_api_exception(e)


@router.post("/analyze-image", response_model=ImageDescriptionResponse)
def analyze_image(
    request: ImageDataRequest,
    analyst: ImageAnalystDep,
    user: AuthUser = Depends(get_current_user),
):
    """Describe the style of a reference poster so it can be reused as a template."""
    try:
        description = analyst.describe(request.image_data)
    except ApplicationError as e:
        raise to_api_exception(e)
    return ImageDescriptionResponse(description=description)


@router.post("/extract-text", response_model=ExtractTextResponse)
def extract_text(
    request: ImageDataRequest,
    extractor: TextExtractorDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Locate the texts of a poster for the in-browser editor.

    Positions and sizes are percentages of the image. An unreadable model
    answer gives an empty list, not an error.
    """
    try:
        blocks = extractor.extract(request.image_data)
    except ApplicationError as e:
        raise to_api_exception(e)
    return ExtractTextResponse(text_blocks=blocks)


@router.post("/transcribe-audio", response_model=TranscriptionResponse)
def transcribe(
    request: TranscribeRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Voice input: transcribe base64 audio with Whisper."""
    try:
        text = transcribe_audio(request.audio_base64)
    except ApplicationError as e:
        raise to_api_exception(e, status_code=500)
    return TranscriptionResponse(text=text)
