from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from nokanban.core.constants import FieldSizes
from nokanban.models.base import Base


class Board(Base):
    # Public URL key
    name: Mapped[str] = mapped_column(
        String(FieldSizes.NAME), unique=True, nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(FieldSizes.TITLE), nullable=False)
    pin_hash: Mapped[str] = mapped_column(String(FieldSizes.HASH), nullable=False)

    # Bumped by every mutation in the board's subtree, used for idle cleanup
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
