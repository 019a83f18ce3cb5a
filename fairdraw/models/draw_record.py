"""Persisted history of performed draws."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from fairdraw.db.utils import dt_iso
from fairdraw.draw.proof import Proof
from fairdraw.draw.timestamps import utcnow

from .base import ID_TYPE, Base

if TYPE_CHECKING:
    from .draw_list import DrawList


class DrawRecord(Base):
    """Immutable record of a draw and its proof."""

    __tablename__ = "draw_history"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    """Surrogate primary key."""

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    """Draw kind (``"names"``, ``"numbers"``, ``"teams"``, ``"order"`` or ``"bingo"``)."""

    input_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    """Configuration as supplied by the caller, private keys included."""

    result: Mapped[dict] = mapped_column(JSON, nullable=False)
    """Algorithm output."""

    proof: Mapped[dict] = mapped_column(JSON, nullable=False)
    """Full public proof in its JSON form."""

    proof_hash: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    """Copy of ``proof["hash"]`` for prefix lookups."""

    verification_code: Mapped[str] = mapped_column(String(9), nullable=False, index=True)
    """Short ``HHHH-TTTT`` code derived from the proof."""

    points_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Points credited to the user for this draw."""

    list_id: Mapped[Optional[int]] = mapped_column(
        ID_TYPE, ForeignKey("draw_lists.id", ondelete="SET NULL"), nullable=True
    )
    """Saved list the draw was run against, if any."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    """Timestamp when the record was stored."""

    draw_list: Mapped[Optional["DrawList"]] = relationship(back_populates="records")
    """Relationship to the saved list, if any."""

    __table_args__ = (Index("ix_draw_history_created_at", "created_at"),)

    def __init__(
        self,
        *,
        kind: str,
        input_data: dict,
        result: dict,
        proof: dict,
        proof_hash: str,
        verification_code: str,
        points_earned: int = 0,
        draw_list: Optional["DrawList"] = None,
        list_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.kind = kind
        self.input_data = input_data
        self.result = result
        self.proof = proof
        self.proof_hash = proof_hash
        self.verification_code = verification_code
        self.points_earned = points_earned
        if draw_list is not None:
            self.draw_list = draw_list
        if list_id is not None:
            self.list_id = list_id
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<DrawRecord(id={id}, kind={kind}, code={code})>".format(
            id=self.id,
            kind=self.kind,
            code=self.verification_code,
        )

    def get_proof(self) -> Proof:
        """Return the stored proof as a :class:`Proof`."""
        return Proof.from_dict(self.proof)

    def to_json(self) -> dict[str, Any]:
        """Serialize the record for API responses."""
        return {
            "id": self.id,
            "kind": self.kind,
            "input_data": self.input_data,
            "result": self.result,
            "proof": self.proof,
            "verification_code": self.verification_code,
            "points_earned": self.points_earned,
            "list_id": self.list_id,
            "created_at": dt_iso(self.created_at),
        }

    @classmethod
    def get_by_verification_code(
        cls, session: Session, code: str
    ) -> Optional["DrawRecord"]:
        """Return the most recent record carrying ``code``."""
        stmt = (
            select(cls)
            .where(cls.verification_code == code)
            .order_by(cls.created_at.desc(), cls.id.desc())
        )
        return session.scalars(stmt).first()

    @classmethod
    def find_by_hash_prefix(
        cls, session: Session, prefix: str, limit: int = 50
    ) -> list["DrawRecord"]:
        """Return records whose proof hash starts with ``prefix`` (case-insensitive)."""
        stmt = (
            select(cls)
            .where(cls.proof_hash.startswith(prefix.lower(), autoescape=True))
            .order_by(cls.created_at.desc(), cls.id.desc())
            .limit(limit)
        )
        return list(session.scalars(stmt))


__all__ = ["DrawRecord"]
