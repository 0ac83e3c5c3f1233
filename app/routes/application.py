# ========================================
# app/routes/application.py
# ========================================

import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.database import get_db
from app.models.application import APPLICATION_STATUSES, DEFAULT_STATUS, Application
from app.schemas.application import ApiResponse, ApplicationCreate, ApplicationReceipt, ApplicationStatusUpdate
from app.utils.auth import admin_required, get_current_user, is_admin
from app.utils.query import (
    APPLICATION_SEARCH_FIELDS,
    CANDIDATE_SEARCH_FIELDS,
    DEFAULT_CANDIDATE_LIMIT,
    DEFAULT_LIMIT,
    build_application_query,
    build_pagination,
    build_sort,
    fetch_page,
    parse_page,
)
from app.utils.statistics import overview, status_breakdown
from app.utils.validation import clean_application, validate_application

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

SERVER_ERROR = "Server error"
APPLICANT_PROJECTION = {"name": 1, "email": 1, "role": 1}


def serialize_application(doc: dict) -> dict:
    return Application.model_validate(doc).model_dump()


async def populate_applicants(db, docs: List[dict]) -> List[dict]:
    """Serialize applications, swapping ``appliedBy`` for a short applicant profile."""
    user_ids = list({doc["appliedBy"] for doc in docs if isinstance(doc.get("appliedBy"), ObjectId)})

    applicants = {}
    if user_ids:
        async for user in db.users.find({"_id": {"$in": user_ids}}, APPLICANT_PROJECTION):
            applicants[user["_id"]] = {
                "id": str(user["_id"]),
                "name": user.get("name"),
                "email": user.get("email"),
                "role": user.get("role"),
            }

    result = []
    for doc in docs:
        item = serialize_application(doc)
        applicant = applicants.get(doc.get("appliedBy"))
        if applicant:
            item["appliedBy"] = applicant
        result.append(item)
    return result


def parse_application_id(application_id: str) -> ObjectId:
    if not ObjectId.is_valid(application_id):
        raise HTTPException(status_code=400, detail="Invalid application ID")
    return ObjectId(application_id)


# ===========================
# APPLICANT ENDPOINTS
# ===========================

# 1. SUBMIT APPLICATION
@router.post("", status_code=201, response_model=ApiResponse, response_model_exclude_none=True)
async def submit_application(
    application: ApplicationCreate,
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Submit an application for a job. Status and applicant are always set server-side."""

    payload = application.model_dump()
    result = validate_application(payload)
    if not result.is_valid:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Validation failed", "details": result.errors},
        )

    now = datetime.now(timezone.utc)
    document = {
        **clean_application(payload),
        "status": DEFAULT_STATUS,
        "appliedBy": current_user["_id"],
        "createdAt": now,
        "updatedAt": now,
    }

    try:
        inserted = await db.applications.insert_one(document)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="You have already applied for this position")
    except PyMongoError:
        logger.exception("Error submitting application")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    logger.info("New application submitted: %s for job %s", document["fullName"], document["jobId"])

    return {
        "success": True,
        "message": "Application submitted successfully",
        "data": ApplicationReceipt(
            id=str(inserted.inserted_id), status=document["status"], appliedAt=now
        ).model_dump(),
    }


# 2. LIST APPLICATIONS (Public)
@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
async def list_applications(
    page: Optional[str] = Query(None, description="1-based page number (capped at 1000000)"),
    limit: Optional[str] = Query(None, description="Page size (default 10, max 100)"),
    status: Optional[str] = Query(None, description="Filter by status"),
    job_id: Optional[str] = Query(None, alias="jobId", description="Filter by job"),
    search: Optional[str] = Query(None, description="Search name, email, location, degree or education"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    db=Depends(get_db),
):
    """List applications with filtering, search, sorting and pagination."""

    window = parse_page(page, limit, DEFAULT_LIMIT)
    query = build_application_query(
        status=status, job_id=job_id, search=search, search_fields=APPLICATION_SEARCH_FIELDS
    )

    try:
        docs, total = await fetch_page(db.applications, query, build_sort(sort_by, sort_order), window)
        data = await populate_applicants(db, docs)
    except PyMongoError:
        logger.exception("Error fetching applications")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return {"success": True, "data": data, "pagination": build_pagination(window, total)}


# 3. MY APPLICATIONS
@router.get("/my", response_model=ApiResponse, response_model_exclude_none=True)
async def list_my_applications(
    page: Optional[str] = Query(None, description="1-based page number (capped at 1000000)"),
    limit: Optional[str] = Query(None, description="Page size (default 10, max 100)"),
    status: Optional[str] = Query(None, description="Filter by status"),
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Applications submitted by the caller, newest first."""

    window = parse_page(page, limit, DEFAULT_LIMIT)
    query = {"appliedBy": current_user["_id"]}
    if status:
        query["status"] = status

    try:
        docs, total = await fetch_page(db.applications, query, build_sort(), window)
    except PyMongoError:
        logger.exception("Error fetching user applications")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return {
        "success": True,
        "data": [serialize_application(doc) for doc in docs],
        "pagination": build_pagination(window, total),
    }


# ===========================
# REVIEW ENDPOINTS
# ===========================

# 4. CANDIDATES WITH STATUS BREAKDOWN
@router.get("/candidates", response_model=ApiResponse, response_model_exclude_none=True)
async def list_candidates(
    page: Optional[str] = Query(None, description="1-based page number (capped at 1000000)"),
    limit: Optional[str] = Query(None, description="Page size (default 20, max 100)"),
    status: Optional[str] = Query(None),
    job_id: Optional[str] = Query(None, alias="jobId"),
    education_status: Optional[str] = Query(None, alias="educationStatus"),
    search: Optional[str] = Query(None, description="Also searches AI/ML projects and research papers"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Candidate listing with extended search and a per-status breakdown of the matches."""

    window = parse_page(page, limit, DEFAULT_CANDIDATE_LIMIT)
    query = build_application_query(
        status=status,
        job_id=job_id,
        education_status=education_status,
        search=search,
        search_fields=CANDIDATE_SEARCH_FIELDS,
    )

    try:
        docs, total = await fetch_page(db.applications, query, build_sort(sort_by, sort_order), window)
        data = await populate_applicants(db, docs)
        breakdown = await status_breakdown(db.applications, query)
    except PyMongoError:
        logger.exception("Error fetching candidates")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return {
        "success": True,
        "data": data,
        "statistics": {"totalCandidates": total, "statusBreakdown": breakdown},
        "pagination": build_pagination(window, total, include_limit=True),
        "filters": {
            "appliedStatus": status or "all",
            "appliedJobId": job_id or "all",
            "appliedEducationStatus": education_status or "all",
            "appliedSearch": search or "",
        },
    }


# 5. STATISTICS OVERVIEW
@router.get("/stats/overview", response_model=ApiResponse, response_model_exclude_none=True)
async def get_stats_overview(
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Totals, submissions in the last 7 days and the global status breakdown."""

    try:
        data = await overview(db.applications)
    except PyMongoError:
        logger.exception("Error fetching application stats")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return {"success": True, "data": data}


# 6. GET ONE APPLICATION
@router.get("/{application_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_application(
    application_id: str,
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Fetch one application. Admins see any; applicants only their own."""

    object_id = parse_application_id(application_id)

    try:
        application = await db.applications.find_one({"_id": object_id})
    except PyMongoError:
        logger.exception("Error fetching application")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    if not is_admin(current_user) and str(application.get("appliedBy")) != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        [data] = await populate_applicants(db, [application])
    except PyMongoError:
        logger.exception("Error fetching application")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return {"success": True, "data": data}


# 7. UPDATE STATUS (Admin)
@router.put("/{application_id}/status", response_model=ApiResponse, response_model_exclude_none=True)
async def update_application_status(
    application_id: str,
    status_update: ApplicationStatusUpdate,
    current_user: dict = Depends(admin_required),
    db=Depends(get_db),
):
    """Move an application to another status. Admin only."""

    new_status = status_update.status
    if new_status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status value")

    object_id = parse_application_id(application_id)

    try:
        application = await db.applications.find_one_and_update(
            {"_id": object_id},
            {"$set": {"status": new_status, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if application is None:
            raise HTTPException(status_code=404, detail="Application not found")
        [data] = await populate_applicants(db, [application])
    except PyMongoError:
        logger.exception("Error updating application status")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    logger.info("Application status updated: %s to %s", application_id, new_status)

    return {
        "success": True,
        "message": "Application status updated successfully",
        "data": data,
    }
