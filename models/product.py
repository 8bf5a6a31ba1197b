# --- models/product.py ---
import uuid
from datetime import datetime
from models import db


def _new_id():
    return uuid.uuid4().hex


class Product(db.Model):
    __tablename__ = "product"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)

    # Core details
    name = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    category = db.Column(db.String(50), nullable=False, default="")   # Espresso, Latte, Popular...

    # Pricing (unit price in base currency)
    price = db.Column(db.Float, nullable=False, default=0.0)

    # Inventory & availability
    stock = db.Column(db.Integer, nullable=False, default=0)
    is_available = db.Column(db.Boolean, nullable=False, default=True)

    # Media & extras
    image_url = db.Column(db.String(255), nullable=False, default="")
    rating = db.Column(db.Float, nullable=True)
    extra = db.Column(db.Text, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "image_url": self.image_url,
            "category": self.category,
            "stock": self.stock,
            "is_available": self.is_available,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "rating": self.rating,
            "extra": self.extra,
        }

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
