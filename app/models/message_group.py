from app.extensions import db
from app.models.base import BaseModel, generate_uuid


class MessageGroup(db.Model, BaseModel):
    __tablename__ = "message_groups"

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    seller_id = db.Column(db.String(36), index=True, nullable=False)
    buyer_id = db.Column(db.String(36), index=True, nullable=False)
    buyer_organization_id = db.Column(db.String(36), index=True, nullable=False)
