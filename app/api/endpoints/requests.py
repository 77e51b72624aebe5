import logging
from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from app.api import deps
from app.db.db_models import generate_uuid, utcnow
from app.db.repository import Repository, get_repository
from app.models.request import (
    PaymentStatus, PaymentStatusUpdate, RequestStatus, RequestStatusUpdate,
    ServiceRequest, ServiceRequestCreate, can_transition,
)
from app.models.user import UserInDB, UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

# Timestamp field stamped when a request enters each status
STATUS_TIMESTAMPS = {
    RequestStatus.ACCEPTED: "accepted_at",
    RequestStatus.REJECTED: "rejected_at",
    RequestStatus.COMPLETED: "completed_at",
}


async def _get_request_or_404(repo: Repository, request_id: str) -> ServiceRequest:
    service_request = await repo.get_request(request_id)
    if not service_request:
        raise HTTPException(status_code=404, detail="Request not found")
    return service_request


@router.post("/", response_model=ServiceRequest)
async def create_service_request(
    request_in: ServiceRequestCreate,
    current_user: UserInDB = Depends(deps.get_current_customer),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Customer books a worker. Prices are taken from the worker's profile."""
    worker = await repo.get_worker(request_in.worker_id)
    if not worker:
        raise HTTPException(status_code=404, detail="Worker not found")
    if not worker.offers(request_in.service_type):
        raise HTTPException(
            status_code=400,
            detail=f"Worker does not offer '{request_in.service_type}'",
        )

    service_request = ServiceRequest(
        id=generate_uuid(),
        user_id=current_user.id,
        user_name=current_user.name,
        user_phone=current_user.phone,
        user_email=current_user.email,
        worker_id=worker.id,
        worker_name=worker.name,
        worker_email=worker.email,
        service_type=request_in.service_type,
        description=request_in.description,
        location=request_in.location,
        scheduled_time=request_in.scheduled_time,
        payment_method=request_in.payment_method,
        advance_amount=worker.advance_payment,
        total_amount=worker.hourly_rate,
        created_at=utcnow(),
    )
    await repo.create_request(service_request)
    logger.info(f"Request {service_request.id} created by {current_user.id} for worker {worker.id}")
    return service_request


@router.get("/", response_model=List[ServiceRequest])
async def read_all_requests(
    current_user: UserInDB = Depends(deps.get_current_admin),
    repo: Repository = Depends(get_repository),
) -> Any:
    """List every service request (admin only)."""
    return await repo.list_all_requests()


@router.get("/mine", response_model=List[ServiceRequest])
async def read_my_requests(
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """List the current user's own bookings."""
    return await repo.list_requests_for_user(current_user.id)


@router.get("/worker", response_model=List[ServiceRequest])
async def read_worker_requests(
    current_user: UserInDB = Depends(deps.get_current_worker),
    repo: Repository = Depends(get_repository),
) -> Any:
    """List requests assigned to the current worker."""
    return await repo.list_requests_for_worker(current_user.id)


@router.get("/{request_id}", response_model=ServiceRequest)
async def read_request(
    request_id: str,
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Get a specific service request (participants and admins)."""
    service_request = await _get_request_or_404(repo, request_id)
    if current_user.role != UserRole.ADMIN and current_user.id not in (
        service_request.user_id, service_request.worker_id
    ):
        raise HTTPException(status_code=403, detail="Not authorized")
    return service_request


@router.put("/{request_id}/status", response_model=ServiceRequest)
async def update_request_status(
    request_id: str,
    status_update: RequestStatusUpdate,
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Assigned worker accepts, rejects or completes a request."""
    service_request = await _get_request_or_404(repo, request_id)
    if service_request.worker_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized")

    new_status = status_update.status
    if not can_transition(service_request.status, new_status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change status from '{service_request.status.value}' to '{new_status.value}'",
        )

    now = utcnow()
    service_request = service_request.model_copy(update={
        "status": new_status,
        "updated_at": now,
        STATUS_TIMESTAMPS[new_status]: now,
    })
    await repo.save_request(service_request)
    logger.info(f"Request {request_id} status -> {new_status.value}")
    return service_request


@router.put("/{request_id}/payment", response_model=ServiceRequest)
async def update_payment_status(
    request_id: str,
    payment_update: PaymentStatusUpdate,
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Requesting user records a payment against their booking."""
    service_request = await _get_request_or_404(repo, request_id)
    if service_request.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    if (
        service_request.status == RequestStatus.REJECTED
        and payment_update.payment_status != PaymentStatus.REFUNDED
    ):
        raise HTTPException(status_code=400, detail="Cannot pay for a rejected request")

    service_request = service_request.model_copy(update={
        "payment_status": payment_update.payment_status,
        "updated_at": utcnow(),
    })
    await repo.save_request(service_request)
    logger.info(f"Request {request_id} payment -> {payment_update.payment_status.value}")
    return service_request
