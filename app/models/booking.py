from sqlalchemy import String, Integer, Date, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from app.db.session import Base

BOOKING_STATUSES = ("pending", "approved", "declined")
PAYMENT_MODES = ("online", "onsite")

class Booking(Base):
    __tablename__ = "bookings"
    # Column names stay camelCase: the analytics service queries this table directly.
    __table_args__ = (
        UniqueConstraint("serviceId", "checkInDate", name="uq_bookings_service_checkin"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(320))
    phone_number: Mapped[str] = mapped_column("phoneNumber", String(40))

    service_id: Mapped[int] = mapped_column("serviceId", Integer, index=True)  # catalog id, no FK
    service_name: Mapped[str] = mapped_column("serviceName", String(200))  # copy at booking time

    check_in_date: Mapped[date] = mapped_column("checkInDate", Date)
    check_out_date: Mapped[date] = mapped_column("checkOutDate", Date)

    mode_of_payment: Mapped[str] = mapped_column("modeOfPayment", String(20))  # online, onsite
    reference_number: Mapped[str | None] = mapped_column("referenceNumber", String(100), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, approved, declined

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
