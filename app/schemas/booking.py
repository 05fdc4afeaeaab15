from datetime import date, datetime
from pydantic import BaseModel
from typing import Optional, Union

class BookingCreate(BaseModel):
    # Everything optional here so a missing field is reported as our 400, not a 422.
    name: Optional[str] = None
    email: Optional[str] = None  # plain str, no registry lookup
    phoneNumber: Optional[str] = None
    checkInDate: Optional[str] = None
    checkOutDate: Optional[str] = None
    serviceId: Optional[Union[int, str]] = None
    serviceName: Optional[str] = None
    modeOfPayment: Optional[str] = None
    referenceNumber: Optional[str] = None

class BookingCreated(BaseModel):
    message: str
    bookingId: int

class BookingOut(BaseModel):
    id: int
    name: str
    email: str
    phoneNumber: str
    checkInDate: date
    checkOutDate: date
    serviceId: int
    serviceName: str
    modeOfPayment: str
    referenceNumber: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

class BookedDate(BaseModel):
    checkInDate: date

class StatusUpdate(BaseModel):
    status: Optional[str] = None

class MessageOut(BaseModel):
    message: str
