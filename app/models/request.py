from pydantic import BaseModel, field_validator
from typing import Dict, Optional, Set
from datetime import datetime
from enum import Enum


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    ADVANCE_PAID = "advance_paid"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CASH = "cash"
    UPI = "upi"
    CARD = "card"
    ONLINE = "online"


# Allowed lifecycle moves; anything else is rejected.
STATUS_TRANSITIONS: Dict[RequestStatus, Set[RequestStatus]] = {
    RequestStatus.PENDING: {RequestStatus.ACCEPTED, RequestStatus.REJECTED},
    RequestStatus.ACCEPTED: {RequestStatus.COMPLETED},
    RequestStatus.REJECTED: set(),
    RequestStatus.COMPLETED: set(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in STATUS_TRANSITIONS[current]


# ─── Service Request Schemas ─────────────────────────────────────────

class ServiceRequestCreate(BaseModel):
    worker_id: str
    service_type: str
    description: str = "Home service request"
    location: str
    scheduled_time: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH


class ServiceRequest(BaseModel):
    id: str
    user_id: str
    user_name: str
    user_phone: str = ""
    user_email: str
    worker_id: str
    worker_name: str
    worker_email: str
    service_type: str
    description: str
    location: str
    scheduled_time: Optional[str] = None
    status: RequestStatus = RequestStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod
    advance_amount: float
    total_amount: float
    created_at: datetime
    updated_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RequestStatusUpdate(BaseModel):
    status: RequestStatus

    @field_validator("status", mode="before")
    @classmethod
    def accept_active_alias(cls, v):
        # The worker dashboard labels accepted jobs "active"
        if v == "active":
            return RequestStatus.ACCEPTED
        return v


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus
