"""Pydantic schemas for feedback endpoints."""

from datetime import datetime
from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    booking_id: str = Field(..., min_length=1, max_length=30)
    rating: int = Field(..., ge=1, le=5)
    description: str = Field(..., min_length=1, max_length=1000)


class FeedbackResponse(BaseModel):
    id: int
    booking_id: str
    customer_name: str
    customer_unique_id: str
    rating: int
    description: str
    parcel_status: str
    created_at: datetime


class FeedbackStatistics(BaseModel):
    total_feedbacks: int
    average_rating: float
    five_star: int
    four_star: int
    three_star: int
    two_star: int
    one_star: int
