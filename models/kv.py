from datetime import datetime
from models import db


class KeyValueEntry(db.Model):
    """A single persisted string slot, grouped by namespace."""

    __tablename__ = "kv_entry"
    __table_args__ = (
        db.UniqueConstraint("namespace", "key", name="uq_kv_namespace_key"),
    )

    id = db.Column(db.Integer, primary_key=True)
    namespace = db.Column(db.String(120), nullable=False, index=True)
    key = db.Column(db.String(64), nullable=False)
    value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<KeyValueEntry {self.namespace}/{self.key}>"
