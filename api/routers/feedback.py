"""Feedback endpoints: post-delivery ratings and the officer review screens."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db.database import get_db
from models.booking import Booking
from models.customer import Customer
from models.feedback import Feedback
from schemas import ApiResponse, Page
from schemas.feedback import FeedbackCreate, FeedbackResponse, FeedbackStatistics
from services.auth import ensure_owner_or_officer, require_role
from services.bookings import get_booking
from services.errors import AccessDenied, NotFound, StateConflict
from services.pagination import PageRequest, empty_page, page_payload, paginate

router = APIRouter()
logger = logging.getLogger(__name__)

customer_only = require_role("CUSTOMER")
officer_only = require_role("OFFICER")
any_user = require_role("CUSTOMER", "OFFICER")


def _to_response(feedback: Feedback) -> FeedbackResponse:
    return FeedbackResponse(
        id=feedback.id,
        booking_id=feedback.booking.booking_id,
        customer_name=feedback.customer.customer_name,
        customer_unique_id=feedback.customer.unique_id,
        rating=feedback.rating,
        description=feedback.feedback_description,
        parcel_status=feedback.booking.parcel_status,
        created_at=feedback.created_at,
    )


def _filter_strategies(text: str) -> list:
    """Match clauses tried in priority order: customer name, booking id, description."""
    return [
        ("customer name", Customer.customer_name.icontains(text, autoescape=True)),
        ("booking id", Booking.booking_id.icontains(text, autoescape=True)),
        ("description", Feedback.feedback_description.icontains(text, autoescape=True)),
    ]


@router.post("/add", response_model=ApiResponse[FeedbackResponse], status_code=201)
async def add_feedback(
    data: FeedbackCreate,
    customer: Customer = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """Rate a delivered parcel; one feedback per booking, owner only."""
    booking = await get_booking(db, data.booking_id)
    if booking.customer_id != customer.id:
        raise AccessDenied()
    if booking.parcel_status != "DELIVERED":
        raise StateConflict("Feedback can only be added for delivered parcels")
    if booking.feedback is not None:
        raise StateConflict(f"Feedback already exists for booking {booking.booking_id}")

    feedback = Feedback(
        booking=booking,
        customer=customer,
        rating=data.rating,
        feedback_description=data.description,
    )
    db.add(feedback)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise StateConflict(f"Feedback already exists for booking {data.booking_id}")
    await db.refresh(feedback)

    logger.info("Feedback %s for booking %s: rating=%s", feedback.id, booking.booking_id, feedback.rating)
    return ApiResponse(message="Feedback added successfully", data=_to_response(feedback))


@router.get("/officer/feedbacks", response_model=Page[FeedbackResponse])
async def list_feedbacks(
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, gt=0, le=settings.MAX_PAGE_SIZE),
    filter: str | None = Query(None, max_length=255),
    officer: Customer = Depends(officer_only),
    db: AsyncSession = Depends(get_db),
):
    """
    Feedback for officers, newest first.

    With a filter, the first strategy that matches anything wins; no match
    at all yields an empty page rather than an error.
    """
    page_request = PageRequest(page=page, size=size)
    base = (
        select(Feedback)
        .join(Feedback.customer)
        .join(Feedback.booking)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
    )

    text = (filter or "").strip()
    if not text:
        items, total = await paginate(db, base, page_request)
        return page_payload([_to_response(f) for f in items], total, page_request)

    for label, clause in _filter_strategies(text):
        items, total = await paginate(db, base.where(clause), page_request)
        if total:
            logger.debug("Feedback filter %r matched %d by %s", text, total, label)
            return page_payload([_to_response(f) for f in items], total, page_request)

    logger.debug("Feedback filter %r matched nothing", text)
    return empty_page(page_request)


@router.get("/officer/statistics", response_model=FeedbackStatistics)
async def feedback_statistics(
    officer: Customer = Depends(officer_only),
    db: AsyncSession = Depends(get_db),
):
    """Count, average and star distribution."""
    total, average = (await db.execute(
        select(func.count(Feedback.id), func.avg(Feedback.rating))
    )).one()

    rows = (await db.execute(
        select(Feedback.rating, func.count(Feedback.id)).group_by(Feedback.rating)
    )).all()
    per_star = {rating: count for rating, count in rows}

    return FeedbackStatistics(
        total_feedbacks=total or 0,
        average_rating=round(float(average), 2) if average is not None else 0.0,
        five_star=per_star.get(5, 0),
        four_star=per_star.get(4, 0),
        three_star=per_star.get(3, 0),
        two_star=per_star.get(2, 0),
        one_star=per_star.get(1, 0),
    )


@router.get("/booking/{booking_id}", response_model=FeedbackResponse)
async def get_booking_feedback(
    booking_id: str,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await get_booking(db, booking_id)
    ensure_owner_or_officer(user, booking.customer_id)
    if booking.feedback is None:
        raise NotFound(f"No feedback for booking {booking_id}")
    return _to_response(booking.feedback)
