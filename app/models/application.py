from typing import Any, Literal, Optional, Union
from datetime import datetime

from .base import MongoBaseModel, PyObjectId

ApplicationStatus = Literal["pending", "reviewed", "shortlisted", "rejected", "accepted"]

APPLICATION_STATUSES = ("pending", "reviewed", "shortlisted", "rejected", "accepted")
DEFAULT_STATUS = "pending"

# Applicant-supplied fields, in the order they are validated and stored
APPLICANT_FIELDS = (
    "jobId",
    "fullName",
    "email",
    "phone",
    "location",
    "portfolioUrl",
    "linkedinProfile",
    "educationStatus",
    "degreeDiscipline",
    "researchPapers",
    "internshipExperience",
    "duration",
    "aiMlProjects",
    "motivation",
)


class Application(MongoBaseModel):
    jobId: str
    fullName: str
    email: str
    phone: str
    location: str
    portfolioUrl: str
    linkedinProfile: str
    educationStatus: str
    degreeDiscipline: str
    researchPapers: str
    internshipExperience: str
    duration: str
    aiMlProjects: str
    motivation: str
    status: ApplicationStatus = DEFAULT_STATUS
    # ObjectId string, or the populated applicant summary
    appliedBy: Union[PyObjectId, dict[str, Any]]
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
