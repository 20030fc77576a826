"""
main.py
========
This is the FastAPI entry point for the clinic intake and triage queue.
It:
 - Initializes the database.
 - Seeds the default symptom catalog if entries are missing.
 - Exposes REST API endpoints for tokens, department queues, doctors and symptoms.
 - Maps domain errors onto HTTP status codes.
"""

import os
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import repository
from .db import get_db, init_db, session_scope
from .errors import DuplicateName, DuplicateToken, NotFound, ValidationError
from .intake_manager import (
    call_next_patient, department_tokens, register_patient,
    update_token_status, waiting_counts,
)
from .logger import get_logger
from .models import Base, Department, TokenStatus
from .queue_policy import department_board
from .schemas import (
    AvailabilityUpdate, DepartmentBoardResponse, DoctorCreate, DoctorResponse,
    IntakeRequest, StatusUpdate, SymptomCreate, SymptomResponse, TokenResponse,
)

logger = get_logger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CLINIC_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
SEED_SYMPTOMS = os.getenv("CLINIC_SEED_SYMPTOMS", "true").lower() == "true"

# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(title="Clinic Triage Queue", version="1.0")

# Allow the front desk UI to communicate
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# ERROR MAPPING
# ---------------------------------------------------------------------------

def _error_response(status_code: int):
    async def handler(request: Request, exc: Exception):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


app.add_exception_handler(ValidationError, _error_response(400))
app.add_exception_handler(NotFound, _error_response(404))
app.add_exception_handler(DuplicateName, _error_response(409))
app.add_exception_handler(DuplicateToken, _error_response(409))


# ---------------------------------------------------------------------------
# APP STARTUP EVENT
# ---------------------------------------------------------------------------

@app.on_event("startup")
def startup_event():
    """
    Called when FastAPI starts.
    Initializes the database and seeds the symptom catalog.
    """
    logger.info("Starting clinic triage queue backend...")
    init_db(Base)

    if not SEED_SYMPTOMS:
        return
    with session_scope() as db:
        added = repository.seed_symptom_catalog(db)
    if added:
        logger.info("Seeded %d default symptoms", added)


# ---------------------------------------------------------------------------
# TOKEN ENDPOINTS
# ---------------------------------------------------------------------------

@app.get("/api/tokens", response_model=List[TokenResponse])
def api_list_tokens(department: Optional[Department] = None,
                    status: Optional[TokenStatus] = None,
                    db: Session = Depends(get_db)):
    """All tokens, newest first, optionally filtered by department and status."""
    tokens = repository.list_tokens(db)
    if department is not None:
        tokens = [t for t in tokens if t.department == department]
    if status is not None:
        tokens = [t for t in tokens if t.status == status]
    return tokens


@app.post("/api/tokens/generate-token", response_model=TokenResponse, status_code=201)
def api_generate_token(req: IntakeRequest, db: Session = Depends(get_db)):
    """
    Register a patient.

    - Scores symptoms and assigns the urgency tier
    - Estimates the wait from the department queue
    - Binds the preferred doctor when available
    - Returns the issued token
    """
    return register_patient(
        db,
        name=req.name,
        age=req.age,
        gender=req.gender,
        department=req.department,
        symptoms=req.symptoms,
        preferred_doctor=req.preferred_doctor,
    )


@app.get("/api/tokens/queues")
def api_queue_sizes(db: Session = Depends(get_db)):
    """Waiting-token count for every department."""
    return waiting_counts(db)


@app.get("/api/tokens/queues/{department}", response_model=DepartmentBoardResponse)
def api_department_board(department: Department, db: Session = Depends(get_db)):
    """One department's queue: waiting in service order, then in-progress and completed."""
    board = department_board(department_tokens(db, department), department)
    return {"department": department, **board}


@app.post("/api/tokens/queues/{department}/next", response_model=TokenResponse)
def api_call_next(department: Department, db: Session = Depends(get_db)):
    """Move the highest-priority waiting token of the department to in-progress."""
    return call_next_patient(db, department)


# ---------------------------------------------------------------------------
# DOCTOR ENDPOINTS
# ---------------------------------------------------------------------------

@app.get("/api/tokens/doctors", response_model=List[DoctorResponse])
def api_list_doctors(db: Session = Depends(get_db)):
    """All doctors, including unavailable ones."""
    return repository.list_doctors(db)


@app.post("/api/tokens/doctors", response_model=DoctorResponse, status_code=201)
def api_add_doctor(req: DoctorCreate, db: Session = Depends(get_db)):
    return repository.add_doctor(
        db, req.name, req.department, req.specialization, req.max_patients_per_hour
    )


@app.patch("/api/tokens/doctors/{doctor_id}", response_model=DoctorResponse)
def api_set_doctor_availability(doctor_id: int, req: AvailabilityUpdate,
                                db: Session = Depends(get_db)):
    return repository.set_doctor_availability(db, doctor_id, req.is_available)


# ---------------------------------------------------------------------------
# SYMPTOM ENDPOINTS
# ---------------------------------------------------------------------------

@app.get("/api/tokens/symptoms", response_model=List[SymptomResponse])
def api_list_symptoms(db: Session = Depends(get_db)):
    """Symptom catalog, most urgent first."""
    return repository.list_symptoms(db)


@app.post("/api/tokens/symptoms", response_model=SymptomResponse, status_code=201)
def api_add_symptom(req: SymptomCreate, db: Session = Depends(get_db)):
    return repository.add_symptom(db, req.name, req.weight)


# ---------------------------------------------------------------------------
# SINGLE TOKEN
# ---------------------------------------------------------------------------

@app.get("/api/tokens/{token_id}", response_model=TokenResponse)
def api_get_token(token_id: int, db: Session = Depends(get_db)):
    return repository.get_token(db, token_id)


@app.patch("/api/tokens/{token_id}", response_model=TokenResponse)
def api_update_token_status(token_id: int, req: StatusUpdate, db: Session = Depends(get_db)):
    """Advance a token's status (waiting -> in-progress -> completed)."""
    return update_token_status(db, token_id, req.status)


# ---------------------------------------------------------------------------
# ROOT ENDPOINT
# ---------------------------------------------------------------------------

@app.get("/")
def root():
    """Basic health check endpoint."""
    return {"message": "Clinic triage queue is running!"}
