import uuid
from enum import Enum
from sqlalchemy import Column, String, Float, Text, DateTime, Boolean, Integer, ForeignKey
from models import BIGINT, db
from datetime import datetime


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"


def _new_id():
    return uuid.uuid4().hex


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_customer_timestamp", "customer_id", "timestamp"),
    )
    id = Column(String(32), primary_key=True, default=_new_id)
    customer_id = Column(String(64), nullable=False)
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    subtotal = Column(Float, nullable=False, default=0.0)
    delivery_fee = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)
    payment_method = Column(String(10), nullable=False, default=PaymentMethod.CASH.value)  # Cash or Card
    is_paid = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
    notes = Column(Text, nullable=False, default="")

    items = db.relationship(
        "OrderItem",
        backref="order",
        cascade="all, delete-orphan",
        lazy=True,
        order_by="OrderItem.position",
    )
    status_logs = db.relationship("OrderStatusLog", backref="order", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "delivery_fee": self.delivery_fee,
            "tax": self.tax,
            "total": self.total,
            "payment_method": self.payment_method,
            "is_paid": self.is_paid,
            "status": self.status,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "notes": self.notes,
        }


class OrderItem(db.Model):
    __tablename__ = "order_item"
    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(String(32), db.ForeignKey("order.id"), nullable=False)
    position = db.Column(Integer, nullable=False, default=0)

    product_id = db.Column(db.String(32), nullable=False)
    product_name = db.Column(db.String(100), nullable=False)
    size = db.Column(db.String(20), nullable=False, default="Medium")
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False)
    image_url = db.Column(db.String(255), nullable=False, default="")

    @property
    def subtotal(self):
        return self.quantity * self.price

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "size": self.size,
            "quantity": self.quantity,
            "price": self.price,
            "image_url": self.image_url,
            "subtotal": self.subtotal,
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(String(32), ForeignKey("order.id"), nullable=False)
    status = Column(String(20), nullable=False)
    updated_by = Column(String(64), nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "order_id": self.order_id,
            "status": self.status,
            "updated_by": self.updated_by,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
