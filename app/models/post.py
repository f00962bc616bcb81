from datetime import datetime

from app.extensions import db
from app.models.base import BaseModel, generate_uuid


class Post(db.Model, BaseModel):
    __tablename__ = "posts"

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    organization_id = db.Column(db.String(36), index=True, nullable=False)
    integration_id = db.Column(
        db.String(36), db.ForeignKey("integrations.id"), index=True, nullable=False
    )
    group = db.Column(db.String(100), index=True, nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    publish_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    submitted_for_order_id = db.Column(
        db.String(36), db.ForeignKey("orders.id"), nullable=True
    )
    deleted_at = db.Column(db.DateTime, nullable=True)

    integration = db.relationship("Integration")
    submitted_for_order = db.relationship("Order")
