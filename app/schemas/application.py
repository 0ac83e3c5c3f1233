# ========================================
# app/schemas/application.py
# ========================================

from pydantic import BaseModel, ConfigDict
from typing import Optional, Any, List, Dict
from datetime import datetime


# 1. Input: Submit Application
class ApplicationCreate(BaseModel):
    """Raw submission body.

    Every field is optional here so that missing values are reported by the
    validation layer together with the other field errors. Unknown keys
    (including ``status`` and ``appliedBy``) are dropped.
    """
    model_config = ConfigDict(extra="ignore")

    jobId: Optional[str] = None
    fullName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    portfolioUrl: Optional[str] = None
    linkedinProfile: Optional[str] = None
    educationStatus: Optional[str] = None
    degreeDiscipline: Optional[str] = None
    researchPapers: Optional[str] = None
    internshipExperience: Optional[str] = None
    duration: Optional[str] = None
    aiMlProjects: Optional[str] = None
    motivation: Optional[str] = None


# 2. Input: Update Status
class ApplicationStatusUpdate(BaseModel):
    status: Optional[str] = None  # pending, reviewed, shortlisted, rejected, accepted


# 3. Output: Field error
class FieldError(BaseModel):
    field: str
    message: str


# 4. Output: Submission receipt
class ApplicationReceipt(BaseModel):
    id: str
    status: str
    appliedAt: Optional[datetime] = None


# 5. Output: Pagination block
class Pagination(BaseModel):
    currentPage: int
    totalPages: int
    totalApplications: int
    hasNextPage: bool
    hasPrevPage: bool
    limit: Optional[int] = None


# 6. Output: Candidate listing statistics
class CandidateStatistics(BaseModel):
    totalCandidates: int
    statusBreakdown: Dict[str, int]


# 7. Output: Filters echoed back on the candidate listing
class CandidateFilters(BaseModel):
    appliedStatus: str
    appliedJobId: str
    appliedEducationStatus: str
    appliedSearch: str


# 8. Output: Response envelope shared by every endpoint
class ApiResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[List[FieldError]] = None
    pagination: Optional[Pagination] = None
    statistics: Optional[CandidateStatistics] = None
    filters: Optional[CandidateFilters] = None
