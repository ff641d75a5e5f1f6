"""
FastAPI application for the Verq mock interview backend.

Endpoints:
- POST /users - Register an interview owner
- POST /interviews/start - Upload resume + job role, get the first question
- GET /interviews - List the caller's interviews
- GET /interviews/{id} - Interview details
- POST /interviews/{id}/answer - Submit a recorded answer
- POST /interviews/{id}/follow-up - Ask a follow-up question
- POST /interviews/{id}/finalize - Retry the overall evaluation
- POST /interviews/{id}/cancel - Cancel an interview
- GET /health - Health check

The caller's identity arrives in the X-User-Id header; authentication is
handled in front of this service.
"""
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from verq.api import (
    AnswerData,
    ErrorResponse,
    FollowUpData,
    HealthResponse,
    InterviewDetail,
    InterviewStartData,
    InterviewSummary,
    RegisterUserRequest,
    SuccessResponse,
    UserResponse,
    get_service,
)
from verq.errors import (
    ConcurrentModificationError,
    InvalidStateError,
    MalformedEvaluationError,
    NotFoundError,
    ResumeExtractionError,
    UpstreamServiceError,
    ValidationError,
    VerqError,
)
from verq.interview import Interview, InterviewSession
from verq.utils.logger import setup_logger

logger = setup_logger("fastapi_app")

# Create FastAPI app
app = FastAPI(
    title="Verq Interview API",
    description="AI mock interviews: resume-based questions, spoken answers, structured feedback",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize service on startup."""
    logger.info("Starting Verq Interview API...")
    service = get_service()
    if not service.is_ready() and not service.initialize():
        logger.error("Service initialization failed - interview endpoints will return 503")


def status_code_for(error: VerqError) -> int:
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, (InvalidStateError, ConcurrentModificationError)):
        return status.HTTP_409_CONFLICT
    if isinstance(error, ResumeExtractionError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, (UpstreamServiceError, MalformedEvaluationError)):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(VerqError)
async def verq_error_handler(request: Request, exc: VerqError):
    code = status_code_for(exc)
    log = logger.error if code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} failed ({code}): {exc.message}")
    return JSONResponse(status_code=code, content=ErrorResponse(message=exc.message).model_dump())


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=str(exc.detail)).model_dump()
    )


def success(data, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=SuccessResponse(data=data).model_dump(mode="json")
    )


def get_session() -> InterviewSession:
    """Dependency returning the live InterviewSession."""
    service = get_service()
    if not service.is_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized. Please check /health endpoint."
        )
    return service.session


def owned_interview(session: InterviewSession, interview_id: str, user_id: str) -> Interview:
    interview = session.get_interview(interview_id)
    if interview.owner_id != user_id:
        logger.warning(f"Unauthorized access attempt: interview={interview_id}, user={user_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized access")
    return interview


async def read_upload(upload: UploadFile, kind: str, allowed_prefix: str) -> bytes:
    """Read an uploaded file, enforcing type and size limits."""
    content_type = upload.content_type or ""
    if not content_type.startswith(allowed_prefix):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type for {kind}. Only PDF and audio files are allowed."
        )
    data = await upload.read()
    limit = get_service().settings.max_upload_bytes
    if len(data) > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The {kind} file is too large (limit {limit // (1024 * 1024)}MB)."
        )
    return data


@app.get("/", tags=["General"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Verq Interview API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse, tags=["General"])
async def health_check():
    """Health check endpoint."""
    service = get_service()
    return HealthResponse(
        status="healthy" if service.is_ready() else "not ready",
        llm_ready=service.llm is not None,
        storage_dir=str(service.settings.storage_dir)
    )


@app.post("/users", tags=["Users"], status_code=status.HTTP_201_CREATED)
def register_user(request: RegisterUserRequest, session: InterviewSession = Depends(get_session)):
    """Register the owner record interviews are attached to."""
    owner = session.register_owner(request.user_id, request.email, request.display_name)
    return success(UserResponse(**owner.model_dump()), status.HTTP_201_CREATED)


@app.post("/interviews/start", tags=["Interviews"], status_code=status.HTTP_201_CREATED)
async def start_interview(
    job_role: str = Form(...),
    resume: UploadFile = File(...),
    x_user_id: str = Header(...),
    session: InterviewSession = Depends(get_session)
):
    """
    Start a new interview.

    This endpoint:
    1. Extracts text from the uploaded PDF resume
    2. Creates the interview
    3. Generates the first question
    """
    resume_bytes = await read_upload(resume, "resume", "application/pdf")
    logger.info(f"Starting new interview for user {x_user_id}")
    result = session.start(x_user_id, job_role, resume_bytes)
    return success(
        InterviewStartData(
            interview_id=result.interview_id,
            question=result.question,
            status=result.status.value
        ),
        status.HTTP_201_CREATED
    )


@app.get("/interviews", tags=["Interviews"])
def list_interviews(x_user_id: str = Header(...), session: InterviewSession = Depends(get_session)):
    """List the caller's interviews, newest first."""
    interviews = session.list_interviews(x_user_id)
    return success([
        InterviewSummary.from_interview(interview).model_dump(mode="json")
        for interview in interviews
    ])


@app.get("/interviews/{interview_id}", tags=["Interviews"])
def get_interview(
    interview_id: str,
    x_user_id: str = Header(...),
    session: InterviewSession = Depends(get_session)
):
    """Get interview details."""
    interview = owned_interview(session, interview_id, x_user_id)
    return success(InterviewDetail.from_interview(interview))


@app.post("/interviews/{interview_id}/answer", tags=["Interviews"])
async def submit_answer(
    interview_id: str,
    current_question: str = Form(...),
    audio: UploadFile = File(...),
    expected_rounds: Optional[int] = Form(None),
    x_user_id: str = Header(...),
    session: InterviewSession = Depends(get_session)
):
    """
    Submit a recorded answer and get the next question.

    After the final round the response carries the overall evaluation
    instead of a next question.
    """
    owned_interview(session, interview_id, x_user_id)
    audio_bytes = await read_upload(audio, "audio", "audio/")
    logger.info(f"Processing answer for interview {interview_id}")
    result = session.submit_answer(interview_id, current_question, audio_bytes, expected_rounds)
    return success(AnswerData(
        is_complete=result.is_complete,
        evaluation=result.evaluation,
        next_question=result.next_question,
        overall_evaluation=result.overall_evaluation
    ))


@app.post("/interviews/{interview_id}/follow-up", tags=["Interviews"])
def follow_up(
    interview_id: str,
    x_user_id: str = Header(...),
    session: InterviewSession = Depends(get_session)
):
    """Generate a follow-up question from the latest answer."""
    owned_interview(session, interview_id, x_user_id)
    return success(FollowUpData(next_question=session.generate_follow_up(interview_id)))


@app.post("/interviews/{interview_id}/finalize", tags=["Interviews"])
def finalize_interview(
    interview_id: str,
    x_user_id: str = Header(...),
    session: InterviewSession = Depends(get_session)
):
    """Produce (or return) the overall evaluation once every question is answered."""
    owned_interview(session, interview_id, x_user_id)
    return success(session.finalize(interview_id))


@app.post("/interviews/{interview_id}/cancel", tags=["Interviews"])
def cancel_interview(
    interview_id: str,
    x_user_id: str = Header(...),
    session: InterviewSession = Depends(get_session)
):
    """Cancel an interview."""
    owned_interview(session, interview_id, x_user_id)
    interview = session.cancel(interview_id)
    return success(InterviewSummary.from_interview(interview))


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
