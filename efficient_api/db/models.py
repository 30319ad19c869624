from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from efficient_api.db.base import Base
from efficient_api.domain.messages import Message


class MessageRecord(Base):
    __tablename__ = "messages"
    __table_args__ = (UniqueConstraint("title", name="uq_messages_title"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def to_domain(self) -> Message:
        return Message(id=self.id, title=self.title, body=self.body, created_at=self.created_at)


Index("ix_messages_created_at", MessageRecord.created_at)
