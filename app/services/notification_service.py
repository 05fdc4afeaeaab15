from datetime import date
from sqlalchemy.orm import Session
from app.models.booking import Booking
from app.models.email_log import EmailLog
from app.services.email_service import queue_email

def format_date(d: date) -> str:
    """US short form, e.g. 12/1/2025."""
    return f"{d.month}/{d.day}/{d.year}"

def render_status_email(booking: Booking, status: str) -> tuple[str, str]:
    if status == "approved":
        subject = "Your Booking Has Been Approved"
        body = (
            f"Hello {booking.name},\n\n"
            f"Your reservation for {booking.service_name} from {format_date(booking.check_in_date)} "
            f"to {format_date(booking.check_out_date)} has been APPROVED.\n\n"
            "Thank you!"
        )
    elif status == "declined":
        subject = "Your Booking Has Been Declined"
        body = (
            f"Hello {booking.name},\n\n"
            f"We're sorry, but your reservation for {booking.service_name} has been declined.\n\n"
            "Please contact us for more details."
        )
    else:
        raise ValueError(f"no email template for status {status!r}")
    return subject, body

def notify_status_change(db: Session, booking: Booking) -> EmailLog:
    subject, body = render_status_email(booking, booking.status)
    return queue_email(db, booking.email, subject, body, related_booking_id=booking.id)
