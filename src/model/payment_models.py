from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from src.model.base import Base, BaseMixin
from src.model.enums import PaymentStatus


class Payment(Base, BaseMixin):
    """
    A hosted checkout attempt for a paid course.

    provider_session_id is the Stripe Checkout Session id and is the key
    webhook events are matched on.
    """

    __tablename__ = "payments"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    provider_session_id = Column(String(255), unique=True, nullable=False, index=True)
    status = Column(
        SQLEnum(PaymentStatus, name="payment_status"),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    paid_at = Column(DateTime(timezone=True), nullable=True)

    course = relationship("Course", lazy="joined")
    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<Payment(id={self.id}, session={self.provider_session_id}, status={self.status})>"
