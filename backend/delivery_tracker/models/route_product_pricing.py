from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from delivery_tracker.models.base import Base, utcnow


class RouteProductPricing(Base):
    """Route-specific price/availability override for one product."""

    __tablename__ = "route_product_pricing"
    __table_args__ = (
        UniqueConstraint("route_id", "product_id", name="uq_pricing_route_product"),
        Index("idx_route_product_pricing_lookup", "route_id", "product_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    route_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("routes.id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    price_per_ton: Mapped[float] = mapped_column(Float, nullable=False)
    # NULL reads as available; only an explicit False hides the product
    is_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    # Relationships
    route = relationship("Route", back_populates="pricing")
    product = relationship("Product", back_populates="pricing")
