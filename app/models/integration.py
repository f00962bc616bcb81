from app.enums.integration import IntegrationType
from app.extensions import db
from app.models.base import BaseModel, generate_uuid


class Integration(db.Model, BaseModel):
    __tablename__ = "integrations"
    __table_args__ = (
        db.UniqueConstraint(
            "organization_id", "internal_id", name="integrations_org_internal_id"
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    organization_id = db.Column(db.String(36), index=True, nullable=False)
    internal_id = db.Column(db.String(255), nullable=False)
    type = db.Column(
        db.Enum(*IntegrationType.choices(), name="integration_type"), nullable=False
    )
    name = db.Column(db.String(255), nullable=False)
    picture = db.Column(db.String(1024), nullable=True)
    profile = db.Column(db.String(255), nullable=True)
    provider_identifier = db.Column(db.String(100), index=True, nullable=False)

    token = db.Column(db.Text, nullable=False)
    refresh_token = db.Column(db.Text, nullable=True)
    token_expiration = db.Column(db.DateTime, nullable=True, index=True)

    disabled = db.Column(db.Boolean, nullable=False, default=False)
    in_between_steps = db.Column(db.Boolean, nullable=False, default=False)
    refresh_needed = db.Column(db.Boolean, nullable=False, default=False)

    posting_times = db.Column(db.Text, nullable=True)
    custom_instance_details = db.Column(db.Text, nullable=True)

    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    print_filter = ("token", "refresh_token")
    to_json_filter = ("token", "refresh_token", "custom_instance_details")
    to_json_parse = ("posting_times",)
