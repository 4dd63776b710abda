from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# =================================================
# Base
# =================================================

class Base(DeclarativeBase):
    pass


# =================================================
# Processed Gmail Messages
# =================================================

class ProcessedGmailMessage(Base):
    """
    Idempotency key per mailbox message.

    Written after the case file and before the message is marked read, so a
    crash between the two never causes a second case for the same message.
    """

    __tablename__ = "processed_gmail_messages"

    gmail_message_id: Mapped[str] = mapped_column(Text, primary_key=True)

    case_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
