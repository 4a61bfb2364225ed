"""
Password reset model for 6-digit one-time recovery codes.

Each code is single-use and time-limited (10 minutes by default). Several
unused codes for the same user may coexist; requesting a new code does not
invalidate earlier ones.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.database import Base


class PasswordReset(Base):
    """
    Password recovery codes.

    Features:
    - 6-digit numeric codes
    - Expiration timestamp fixed at creation
    - Single-use enforcement (consumed together with the password update)
    - Cascade delete with user
    """
    __tablename__ = "password_resets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # 6-digit recovery code
    otp_code = Column(String(6), nullable=False)

    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    is_used = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="password_resets")

    # Composite index for efficient code lookups
    __table_args__ = (
        Index('ix_password_resets_user_code', 'user_id', 'otp_code'),
    )

    def __repr__(self):
        return f"<PasswordReset(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at}, is_used={self.is_used})>"
