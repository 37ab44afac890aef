from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from nokanban.core.constants import FieldSizes
from nokanban.models.base import Base


class Column(Base):
    board_id: Mapped[str] = mapped_column(
        String(FieldSizes.ULID),
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(FieldSizes.TITLE), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
