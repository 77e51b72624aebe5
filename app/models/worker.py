from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class WorkerReview(BaseModel):
    user_id: str
    rating: int
    review: Optional[str] = None
    created_at: datetime


class WorkerProfile(BaseModel):
    """Public worker profile. ``id`` is the owning user's id."""
    id: str
    user_id: str
    name: str
    email: str
    phone: str = ""
    service_types: List[str] = []
    rating: float = 0.0
    total_ratings: int = 0
    hourly_rate: float
    advance_payment: float
    available_times: str
    previous_works: List[str] = []
    bio: str = ""
    experience: str = ""
    location: str = ""
    verified: bool = False
    reviews: List[WorkerReview] = []
    created_at: datetime

    def offers(self, service_type: str) -> bool:
        return service_type in self.service_types


class WorkerUpdate(BaseModel):
    service_types: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    advance_payment: Optional[float] = Field(default=None, ge=0)
    available_times: Optional[str] = None
    previous_works: Optional[List[str]] = None
    bio: Optional[str] = None
    experience: Optional[str] = None
    location: Optional[str] = None


class WorkerVerify(BaseModel):
    verified: bool = True


class RatingCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    review: Optional[str] = None
