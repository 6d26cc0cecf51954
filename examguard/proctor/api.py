"""
Proctoring API - FastAPI endpoints for exam proctoring

Endpoints:
- POST /api/proctor/start - Start a proctoring session
- POST /api/proctor/stream - Stream a frame (plus browser signals) for processing
- POST /api/proctor/signal - Report browser signals without a frame
- POST /api/proctor/stop - Stop session and get results
- GET /api/proctor/status/{session_id} - Get session status
- GET /api/proctor/violations/{session_id} - Get the session's violation log
"""

import asyncio
import base64
import binascii
import logging
from typing import Dict, List, Optional, Any

import cv2
import numpy as np
from fastapi import APIRouter, HTTPException, BackgroundTasks
from pydantic import BaseModel, Field

from ..config import settings
from .session import ProctorSession
from .types import ExternalSignals, KeyEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/proctor", tags=["Proctoring"])

# In-memory session storage
_sessions: Dict[str, ProctorSession] = {}


# ============== Request/Response Models ==============

class StartSessionRequest(BaseModel):
    """Request to start a proctoring session"""
    assessment_id: str = Field(..., description="ID of the assessment")
    student_id: str = Field(..., description="ID of the student")


class StartSessionResponse(BaseModel):
    """Response after starting a session"""
    session_id: str
    status: str
    message: str


class KeyEventModel(BaseModel):
    """Browser keydown snapshot"""
    key: str = Field(..., description="KeyboardEvent.key value")
    ctrl: bool = False
    shift: bool = False
    alt: bool = False


class SignalFields(BaseModel):
    """Browser-side integrity signals; every field optional"""
    tab_visible: Optional[bool] = Field(None, description="False when document is hidden")
    fullscreen: Optional[bool] = Field(None, description="Current fullscreen state")
    key_event: Optional[KeyEventModel] = Field(None, description="Last observed keydown")
    current_question: Optional[int] = Field(None, ge=0, description="Zero-based question index")

    def to_signals(self) -> ExternalSignals:
        key_event = None
        if self.key_event is not None:
            key_event = KeyEvent(
                key=self.key_event.key,
                ctrl=self.key_event.ctrl,
                shift=self.key_event.shift,
                alt=self.key_event.alt
            )
        return ExternalSignals(
            tab_visible=self.tab_visible,
            fullscreen=self.fullscreen,
            key_event=key_event,
            current_question=self.current_question
        )


class StreamFrameRequest(SignalFields):
    """Request to process a webcam frame"""
    session_id: str = Field(..., description="Session ID from /start")
    frame_base64: str = Field(..., description="Base64 encoded JPEG/PNG frame")


class SignalRequest(SignalFields):
    """Request to classify browser signals"""
    session_id: str


class ViolationModel(BaseModel):
    type: str
    timestamp: str
    severity: str
    description: str


class FrameAnalysisModel(BaseModel):
    skin_pixels: int
    face_regions: int
    movement_detected: bool


class DetectionModel(BaseModel):
    faces: int
    confidence: float
    quality: str
    frame_analysis: FrameAnalysisModel


class StreamFrameResponse(BaseModel):
    """Response after processing a frame"""
    processed: bool
    detection: Optional[DetectionModel] = None
    violations: List[ViolationModel]
    advisory: Optional[str] = None
    suspension_notice: Optional[str] = None
    warning_count: int
    multiple_person_warnings: int
    suspended: bool
    frame_count: int
    quality_issues: Optional[List[str]] = None


class SignalResponse(BaseModel):
    """Response after classifying signals"""
    violations: List[ViolationModel]
    advisory: Optional[str] = None
    warning_count: int


class StopSessionRequest(BaseModel):
    """Request to stop a proctoring session"""
    session_id: str


class StopSessionResponse(BaseModel):
    """Final proctoring results"""
    session_id: str
    frames_processed: int
    violation_counts: Dict[str, int]
    warning_count: int
    multiple_person_warnings: int
    suspended: bool
    duration_seconds: float


class SessionStatusResponse(BaseModel):
    """Current session status"""
    session_id: str
    is_active: bool
    frames_processed: int
    warning_count: int
    multiple_person_warnings: int
    suspended: bool
    last_detection: Optional[DetectionModel] = None
    advisory: Optional[str] = None
    duration_seconds: float


class ViolationLogResponse(BaseModel):
    session_id: str
    violations: List[ViolationModel]


# ============== Helpers ==============

def _get_session(session_id: str, require_active: bool = True) -> ProctorSession:
    session = _sessions.get(session_id)

    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    if require_active and not session.is_active:
        raise HTTPException(status_code=400, detail="Session is not active")

    return session


def decode_frame(frame_base64: str) -> np.ndarray:
    """
    Decode a base64 image into an RGB array.

    Raises:
        HTTPException(400) if the payload is not a decodable image
    """
    try:
        frame_bytes = base64.b64decode(frame_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Invalid frame data")

    frame_array = np.frombuffer(frame_bytes, dtype=np.uint8)
    frame = cv2.imdecode(frame_array, cv2.IMREAD_COLOR) if frame_array.size else None

    if frame is None:
        raise HTTPException(status_code=400, detail="Invalid frame data")

    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


# ============== API Endpoints ==============

@router.post("/start", response_model=StartSessionResponse)
async def start_session(request: StartSessionRequest):
    """
    Start a new proctoring session.

    Each session gets its own consensus history and warning counter.
    """
    try:
        session = ProctorSession(
            assessment_id=request.assessment_id,
            student_id=request.student_id
        )

        _sessions[session.id] = session

        logger.info(f"Started proctoring session: {session.id}")

        return StartSessionResponse(
            session_id=session.id,
            status="active",
            message="Proctoring session started successfully"
        )

    except Exception as e:
        logger.error(f"Failed to start proctoring session: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/stream", response_model=StreamFrameResponse)
async def stream_frame(request: StreamFrameRequest):
    """
    Process a single webcam frame.

    Decodes the base64 frame, runs one detection cycle and returns the
    consensus detection, emitted violations and advisory state.
    """
    session = _get_session(request.session_id)

    try:
        frame = decode_frame(request.frame_base64)
        result = session.process_frame(frame, request.to_signals())

        return StreamFrameResponse(**result)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Frame processing error: {e}")
        raise HTTPException(status_code=500, detail=f"Frame processing error: {str(e)}")


@router.post("/signal", response_model=SignalResponse)
async def report_signal(request: SignalRequest):
    """
    Record browser-side signals (tab visibility, fullscreen, keys).

    Called by the frontend on visibilitychange, fullscreenchange and
    keydown events between frames.
    """
    session = _get_session(request.session_id)

    result = session.process_signals(request.to_signals())

    return SignalResponse(**result)


@router.post("/stop", response_model=StopSessionResponse)
async def stop_session(request: StopSessionRequest, background_tasks: BackgroundTasks):
    """
    Stop a proctoring session and get final results.
    """
    session = _get_session(request.session_id, require_active=False)

    try:
        result = session.finalize()

        # Schedule cleanup
        background_tasks.add_task(_cleanup_session, request.session_id)

        return StopSessionResponse(
            session_id=result["session_id"],
            frames_processed=result["frames_processed"],
            violation_counts=result["violation_counts"],
            warning_count=result["warning_count"],
            multiple_person_warnings=result["multiple_person_warnings"],
            suspended=result["suspended"],
            duration_seconds=result["duration_seconds"]
        )

    except Exception as e:
        logger.error(f"Error stopping session: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/status/{session_id}", response_model=SessionStatusResponse)
async def get_session_status(session_id: str):
    """
    Get current status of a proctoring session.
    """
    session = _get_session(session_id, require_active=False)
    status: Dict[str, Any] = session.get_status()

    return SessionStatusResponse(**status)


@router.get("/violations/{session_id}", response_model=ViolationLogResponse)
async def get_violations(session_id: str):
    """
    Get every violation recorded for a session, oldest first.
    """
    session = _get_session(session_id, require_active=False)

    return ViolationLogResponse(
        session_id=session.id,
        violations=[ViolationModel(**v.to_dict()) for v in session.violations]
    )


# ============== Background Tasks ==============

async def _cleanup_session(session_id: str):
    """Clean up session resources after delay"""
    # Wait a bit before cleanup to allow any final requests
    await asyncio.sleep(settings.SESSION_CLEANUP_DELAY_SECONDS)

    if session_id in _sessions:
        del _sessions[session_id]
        logger.info(f"Cleaned up session: {session_id}")


# ============== Health Check ==============

@router.get("/health")
async def health_check():
    """Health check for proctoring module"""
    return {
        "status": "healthy",
        "active_sessions": len(_sessions),
        "module": "proctoring"
    }
