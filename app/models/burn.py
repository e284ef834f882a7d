"""
Burn model.

One row per burn transaction. Rows are immutable once written.
"""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Burn(Base):
    """
    Recorded burn transaction.

    Used to:
    - Suppress duplicate alerts across restarts
    - Feed the aggregate statistics shown in alerts and /stats
    """

    __tablename__ = "burns"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    tx_hash: Mapped[str] = mapped_column(
        String(66), nullable=False, unique=True, index=True
    )
    block_number: Mapped[int] = mapped_column(
        BigInteger, nullable=False, index=True
    )
    timestamp: Mapped[int] = mapped_column(
        BigInteger, nullable=False, index=True
    )  # Unix seconds of the containing block

    # Amounts as decimal strings, never floats
    amount: Mapped[str] = mapped_column(Text, nullable=False)
    amount_raw: Mapped[str] = mapped_column(Text, nullable=False)

    # tx.from (signer) vs the Transfer event's from
    initiator: Mapped[str] = mapped_column(
        String(42), nullable=False, index=True
    )
    transfer_from: Mapped[str | None] = mapped_column(
        String(42), nullable=True
    )

    destination: Mapped[str] = mapped_column(
        String(20), nullable=False
    )  # firepit, dead

    notified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    gas_used: Mapped[str | None] = mapped_column(Text, nullable=True)
    gas_price: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Burn(tx_hash={self.tx_hash[:16]}..., "
            f"block={self.block_number}, amount={self.amount}, "
            f"destination={self.destination})>"
        )
