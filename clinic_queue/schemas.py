"""
schemas.py
==========
Pydantic models used for validating incoming requests and
structuring outgoing API responses.
"""

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Department, Gender, TokenStatus, UrgencyTier


class IntakeRequest(BaseModel):
    """Request body for registering a patient and issuing a token."""
    name: str = Field(min_length=1)
    age: int = Field(ge=0, le=120)
    gender: Gender
    department: Department
    symptoms: List[str] = Field(min_length=1)
    preferred_doctor: Optional[str] = None


class StatusUpdate(BaseModel):
    status: TokenStatus


class DoctorCreate(BaseModel):
    name: str = Field(min_length=1)
    department: Department
    specialization: str = Field(min_length=1)
    max_patients_per_hour: int = Field(ge=1, le=10)


class AvailabilityUpdate(BaseModel):
    is_available: bool


class SymptomCreate(BaseModel):
    name: str = Field(min_length=1)
    weight: int = Field(ge=1, le=10)


class DoctorResponse(BaseModel):
    """Response model for a doctor, including load counters."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    department: Department
    specialization: str
    max_patients_per_hour: int
    current_queue_length: int
    is_available: bool
    preference_count_today: int
    last_reset_date: datetime.datetime


class SymptomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    weight: int


class TokenResponse(BaseModel):
    """Response model for a token."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    token: str
    name: str
    age: int
    gender: Gender
    department: Department
    symptoms: List[str]
    priority_score: int
    urgency: UrgencyTier
    status: TokenStatus
    estimated_wait_minutes: int
    doctor_id: Optional[int] = None
    created_at: datetime.datetime


class DepartmentBoardResponse(BaseModel):
    """One department's tokens split by status; waiting is in service order."""
    department: Department
    waiting: List[TokenResponse]
    in_progress: List[TokenResponse]
    completed: List[TokenResponse]
