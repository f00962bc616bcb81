from app.extensions import db
from app.models.base import BaseModel, generate_uuid


class Order(db.Model, BaseModel):
    __tablename__ = "orders"

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    message_group_id = db.Column(
        db.String(36), db.ForeignKey("message_groups.id"), nullable=False
    )
    status = db.Column(db.String(50), nullable=False, default="PENDING")

    message_group = db.relationship("MessageGroup", lazy="joined")
