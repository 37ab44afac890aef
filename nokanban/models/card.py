from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from nokanban.core.constants import FieldSizes
from nokanban.models.base import Base


class Card(Base):
    column_id: Mapped[str] = mapped_column(
        String(FieldSizes.ULID),
        ForeignKey("columns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(String(FieldSizes.CONTENT), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
