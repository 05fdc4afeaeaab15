from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.booking import Booking
from app.schemas.booking import BookingCreate, BookingCreated, BookingOut, BookedDate, StatusUpdate, MessageOut
from app.services.booking_service import create_booking, list_bookings, list_booked_dates, update_status
from app.services.catalog_client import CatalogClient, get_catalog_client

router = APIRouter(tags=["bookings"])

def booking_out(b: Booking) -> BookingOut:
    return BookingOut(
        id=b.id,
        name=b.name,
        email=b.email,
        phoneNumber=b.phone_number,
        checkInDate=b.check_in_date,
        checkOutDate=b.check_out_date,
        serviceId=b.service_id,
        serviceName=b.service_name,
        modeOfPayment=b.mode_of_payment,
        referenceNumber=b.reference_number,
        status=b.status,
        created_at=b.created_at,
    )

@router.post("/bookings", response_model=BookingCreated, status_code=201)
def create_public_booking(
    body: BookingCreate,
    db: Session = Depends(get_db),
    catalog: CatalogClient | None = Depends(get_catalog_client),
):
    booking = create_booking(db, body.model_dump(), catalog=catalog)
    return BookingCreated(message="Booking created successfully", bookingId=booking.id)

@router.get("/bookings", response_model=list[BookingOut])
def get_bookings(db: Session = Depends(get_db)):
    """All bookings for the admin panel, newest first."""
    return [booking_out(b) for b in list_bookings(db)]

@router.get("/bookings/service/{service_id}", response_model=list[BookedDate])
def get_booked_dates(service_id: int, db: Session = Depends(get_db)):
    return [BookedDate(checkInDate=d) for d in list_booked_dates(db, service_id)]

@router.put("/bookings/{booking_id}/status", response_model=MessageOut)
def set_booking_status(booking_id: int, body: StatusUpdate, db: Session = Depends(get_db)):
    return MessageOut(message=update_status(db, booking_id, body.status))
