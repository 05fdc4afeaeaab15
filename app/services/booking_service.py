import logging
from datetime import date, datetime
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from app.core.config import settings
from app.core.errors import ValidationError, ConflictError, NotFoundError, NotificationError
from app.models.booking import Booking, BOOKING_STATUSES, PAYMENT_MODES
from app.services.catalog_client import CatalogClient
from app.services.notification_service import notify_status_change

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "name", "email", "phoneNumber", "checkInDate", "checkOutDate",
    "serviceId", "serviceName", "modeOfPayment",
)

# Booking form labels (GCash / Cash) map onto the stored payment modes.
PAYMENT_MODE_ALIASES = {
    **{m: m for m in PAYMENT_MODES},
    "gcash": "online",
    "cash": "onsite",
}

NOTIFY_STATUSES = ("approved", "declined")

CONFLICT_MESSAGE = "Already booked for that check-in date"

def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def normalize_date(value) -> date:
    """Parse ISO dates/datetimes or M/D/YYYY to a calendar date, dropping any time of day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(s, "%m/%d/%Y").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {s}")

def normalize_service_id(value) -> int:
    try:
        sid = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("Invalid serviceId")
    if sid < 1:
        raise ValidationError("Invalid serviceId")
    return sid

def normalize_payment_mode(value: str) -> str:
    mode = PAYMENT_MODE_ALIASES.get(str(value).strip().lower())
    if not mode:
        raise ValidationError("Invalid modeOfPayment")
    return mode

def is_date_taken(db: Session, service_id: int, check_in: date) -> bool:
    row = db.execute(
        select(Booking.id).where(Booking.service_id == service_id, Booking.check_in_date == check_in)
    ).first()
    return row is not None

def create_booking(db: Session, fields: dict, catalog: CatalogClient | None = None) -> Booking:
    if any(_is_blank(fields.get(k)) for k in REQUIRED_FIELDS):
        raise ValidationError("All fields are required")

    service_id = normalize_service_id(fields["serviceId"])
    check_in = normalize_date(fields["checkInDate"])
    check_out = normalize_date(fields["checkOutDate"])
    mode = normalize_payment_mode(fields["modeOfPayment"])
    email = fields["email"].strip()
    if "\n" in email or "\r" in email:
        raise ValidationError("Invalid email")

    if catalog is not None and catalog.get_service(service_id) is None:
        raise ValidationError("Unknown service")

    # Fast path for a friendly error; the unique constraint is what actually guarantees it.
    if is_date_taken(db, service_id, check_in):
        logger.info("Booking conflict for service %s on %s", service_id, check_in)
        raise ConflictError(CONFLICT_MESSAGE)

    booking = Booking(
        name=fields["name"].strip(),
        email=email,
        phone_number=fields["phoneNumber"].strip(),
        service_id=service_id,
        service_name=fields["serviceName"].strip(),
        check_in_date=check_in,
        check_out_date=check_out,
        mode_of_payment=mode,
        reference_number=(fields.get("referenceNumber") or "").strip() or None,
        status="pending",
    )
    db.add(booking)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Booking conflict (constraint) for service %s on %s", service_id, check_in)
        raise ConflictError(CONFLICT_MESSAGE)
    db.refresh(booking)
    logger.info("Booking %s created for service %s on %s", booking.id, service_id, check_in)
    return booking

def list_bookings(db: Session) -> list[Booking]:
    return list(db.scalars(select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc())))

def list_booked_dates(db: Session, service_id: int) -> list[date]:
    # Every status counts, declined included.
    return list(db.scalars(
        select(Booking.check_in_date).where(Booking.service_id == service_id).order_by(Booking.check_in_date)
    ))

def update_status(db: Session, booking_id: int, status: str | None) -> str:
    if status not in BOOKING_STATUSES:
        raise ValidationError("Invalid status")

    updated = (
        db.query(Booking)
        .filter(Booking.id == booking_id)
        .update({Booking.status: status}, synchronize_session=False)
    )
    db.commit()
    if not updated:
        raise NotFoundError("Booking not found")
    logger.info("Booking %s status set to %s", booking_id, status)

    if status in NOTIFY_STATUSES:
        # The status write is committed; from here on only the notification can fail.
        booking = db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        log = notify_status_change(db, booking)
        if log.status != "sent" and settings.NOTIFY_FAILURE_IS_ERROR:
            raise NotificationError("Email sending failed")

    return f"Status updated to {status}"
