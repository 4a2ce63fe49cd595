from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.model.enums import PaymentStatus


class CheckoutResponse(BaseModel):
    """Where to send the browser to pay"""
    checkout_url: str
    session_id: str


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    course_title: Optional[str] = None
    amount: int
    currency: str
    status: PaymentStatus
    provider_session_id: str
    paid_at: Optional[datetime] = None
    created_date: datetime


class WebhookAck(BaseModel):
    received: bool = True
    event_type: Optional[str] = None
    handled: bool = False
