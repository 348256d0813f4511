from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Index,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)   # 'grain', 'packaging', 'dairy', etc.
    unit = Column(String, nullable=False)                   # 'g', 'ml', 'piece', 'cup', etc.
    stock = Column(Float, nullable=False, default=0)        # -1 = unlimited
    min_stock = Column(Float, nullable=False, default=0)    # low-stock threshold
    unit_cost = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def is_unlimited(self) -> bool:
        return self.stock == -1

    def to_snapshot(self) -> dict:
        """Plain-dict view consumed by the usage/sufficiency functions."""
        return {
            "id": str(self.id),
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "stock": self.stock,
        }


class Dish(Base):
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="general", index=True)
    price = Column(Float, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # {"base_inventory": [...], "conditional_inventory": [...]}
    inventory_config = Column(JSON, nullable=True)

    order_items = relationship("OrderItem", back_populates="dish")

    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "inventory_config": self.inventory_config or {},
        }


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False, index=True)
    table_number = Column(String, nullable=True)
    status = Column(String, nullable=False, default="open", index=True)  # open/paid/cancelled
    total_amount = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    receipts = relationship("Receipt", back_populates="order")

    __table_args__ = (
        Index("ix_orders_status_created_at", "status", "created_at"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    dish_id = Column(Integer, ForeignKey("dishes.id"), nullable=True)

    name = Column(String, nullable=False)
    selected_options = Column(JSON, nullable=False, default=dict)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")
    dish = relationship("Dish", back_populates="order_items")


class Receipt(Base):
    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, index=True)
    bill_number = Column(String, unique=True, nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    table_number = Column(String, nullable=True)

    employee_id = Column(String, nullable=False)
    employee_name = Column(String, nullable=False, default="")
    store_name = Column(String, nullable=False)

    subtotal = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    status = Column(String, nullable=False, default="active", index=True)  # active/void
    notes = Column(Text, nullable=False, default="")

    print_count = Column(Integer, nullable=False, default=0)
    last_printed_at = Column(DateTime(timezone=True), nullable=True)
    checkout_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    order = relationship("Order", back_populates="receipts")
    items = relationship("ReceiptItem", back_populates="receipt", cascade="all, delete-orphan")


class ReceiptItem(Base):
    __tablename__ = "receipt_items"

    id = Column(Integer, primary_key=True, index=True)
    receipt_id = Column(Integer, ForeignKey("receipts.id"), nullable=False, index=True)
    dish_id = Column(String, nullable=True)

    name = Column(String, nullable=False)
    selected_options = Column(JSON, nullable=False, default=dict)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)

    receipt = relationship("Receipt", back_populates="items")
