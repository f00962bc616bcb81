import json
from datetime import datetime, timedelta

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

import const
from app.enums.integration import IntegrationType
from app.lib.logger import org_logger
from app.lib.query import (
    select_rows,
    select_with_filter,
    select_with_filter_one,
    transaction,
    update_one_by_filter,
)
from app.lib.string import make_id
from app.models.integration import Integration
from app.models.message_group import MessageGroup
from app.models.order import Order
from app.models.post import Post

UPDATABLE_FIELDS = {
    column.key for column in Integration.__table__.columns
} - {"id", "created_at", "updated_at"}


def default_posting_times(timezone):
    return [{"time": minutes - timezone} for minutes in const.DEFAULT_POSTING_TIMES]


def parse_posting_times(times):
    """Accept {"time": [...]} or the bare list; return [{"time": int}, ...]."""
    if isinstance(times, dict):
        times = times.get("time")
    if not isinstance(times, (list, tuple)):
        raise ValueError("Posting times must be a list of {'time': minutes}")

    parsed = []
    for entry in times:
        value = entry.get("time") if isinstance(entry, dict) else None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Invalid posting time entry: {entry!r}")
        parsed.append({"time": value})
    return parsed


class IntegrationService:
    """Data access for channel integrations and the posts attached to them.

    `storage` is anything with `upload_simple(path_or_url) -> url`.
    `cdn_url` and `frontend_url` decide whether a picture is already
    hosted by us and can be stored as is.
    """

    def __init__(self, storage, cdn_url, frontend_url):
        self.storage = storage
        self.cdn_url = cdn_url or ""
        self.frontend_url = frontend_url or ""

    @staticmethod
    def _scope(org, id):
        return [Integration.id == id, Integration.organization_id == org]

    def _is_hosted_picture(self, picture):
        return self.cdn_url in picture and self.frontend_url in picture

    def set_times(self, org, id, times):
        posting_times = json.dumps(parse_posting_times(times))
        update_one_by_filter(
            Integration, self._scope(org, id), {"posting_times": posting_times}
        )
        org_logger(org).info(f"Posting times updated for integration {id}")
        return {"id": id}

    def update_integration(self, id, org=None, **params):
        unknown = set(params) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown integration fields: {sorted(unknown)}")

        filters = [Integration.id == id]
        if org is not None:
            filters.append(Integration.organization_id == org)

        with transaction() as session:
            integration = (
                session.execute(select(Integration).where(*filters).with_for_update())
                .scalars()
                .one()
            )

            picture = params.get("picture")
            if picture and not self._is_hosted_picture(picture):
                params["picture"] = self.storage.upload_simple(picture)

            for key, value in params.items():
                setattr(integration, key, value)

        org_logger(integration.organization_id).info(
            f"Integration {id} updated: {sorted(params)}"
        )
        return integration

    def disconnect_channel(self, org, id):
        integration = update_one_by_filter(
            Integration, self._scope(org, id), {"refresh_needed": True}
        )
        org_logger(org).info(f"Integration {id} disconnected")
        return integration

    def create_or_update_integration(
        self,
        org,
        name,
        picture,
        type,
        internal_id,
        provider,
        token,
        refresh_token="",
        expires_in=const.DEFAULT_EXPIRES_IN,
        username=None,
        is_between_steps=False,
        refresh=None,
        timezone=None,
        custom_instance_details=None,
    ):
        if type not in IntegrationType.choices():
            raise ValueError(f"Unknown integration type: {type}")

        data = {
            "type": type,
            "provider_identifier": provider,
            "token": token,
            "refresh_token": refresh_token,
            "internal_id": internal_id,
            "organization_id": org,
            "refresh_needed": False,
        }
        if username is not None:
            data["profile"] = username
        if picture:
            data["picture"] = picture
        # expires_in of 0 means the provider gave no expiry
        if expires_in:
            data["token_expiration"] = datetime.utcnow() + timedelta(
                seconds=expires_in
            )

        create_data = {
            "name": name,
            "in_between_steps": is_between_steps,
            "disabled": False,
            "picture": None,
            "profile": None,
            "token_expiration": None,
            "posting_times": None,
            "custom_instance_details": None,
            "deleted_at": None,
        }
        create_data.update(data)
        if timezone is not None:
            create_data["posting_times"] = json.dumps(default_posting_times(timezone))
        if custom_instance_details:
            create_data["custom_instance_details"] = custom_instance_details

        update_data = dict(data, deleted_at=None)
        if not refresh:
            update_data["in_between_steps"] = is_between_steps

        # a concurrent first connection may insert between our read and insert
        for attempt in range(2):
            try:
                integration, created = self._upsert(
                    org, internal_id, create_data, update_data
                )
                break
            except IntegrityError:
                if attempt:
                    raise
                org_logger(org).warning(
                    f"Integration {provider}:{internal_id} created concurrently, retrying"
                )

        if created:
            action = "created"
        else:
            action = "refreshed" if refresh else "updated"
        org_logger(org).info(
            f"Integration {integration.id} {action} ({provider}:{internal_id})"
        )
        return integration

    @staticmethod
    def _find_by_internal_id(session, org, internal_id):
        return (
            session.execute(
                select(Integration).where(
                    Integration.organization_id == org,
                    Integration.internal_id == internal_id,
                )
            )
            .scalars()
            .first()
        )

    def _upsert(self, org, internal_id, create_data, update_data):
        with transaction() as session:
            integration = self._find_by_internal_id(session, org, internal_id)
            if integration is None:
                integration = Integration(**create_data)
                session.add(integration)
                return integration, True

            for key, value in update_data.items():
                setattr(integration, key, value)
            return integration, False

    def needs_to_be_refreshed(self):
        return select_with_filter(
            Integration,
            [
                Integration.token_expiration
                <= datetime.utcnow() + timedelta(days=const.REFRESH_WINDOW_DAYS),
                Integration.in_between_steps.is_(False),
                Integration.deleted_at.is_(None),
                Integration.refresh_needed.is_(False),
            ],
        )

    def refresh_needed(self, org, id):
        integration = update_one_by_filter(
            Integration, self._scope(org, id), {"refresh_needed": True}
        )
        org_logger(org).info(f"Integration {id} flagged for refresh")
        return integration

    def update_name_and_url(self, id, name=None, url=None, org=None):
        data = {}
        if name is not None:
            data["name"] = name
        if url is not None:
            data["picture"] = url

        filters = [Integration.id == id]
        if org is not None:
            filters.append(Integration.organization_id == org)
        integration = update_one_by_filter(Integration, filters, data)
        org_logger(integration.organization_id).info(
            f"Integration {id} renamed: {sorted(data)}"
        )
        return integration

    def get_integration_by_id(self, org, id):
        return select_with_filter_one(Integration, self._scope(org, id))

    def get_integration_for_order(self, id, order, user, org):
        stmt = (
            select(
                Integration.id,
                Integration.name,
                Integration.picture,
                Integration.in_between_steps,
                Integration.provider_identifier,
            )
            .select_from(Post)
            .join(Integration, Post.integration_id == Integration.id)
            .join(Order, Post.submitted_for_order_id == Order.id)
            .join(MessageGroup, Order.message_group_id == MessageGroup.id)
            .where(
                Post.integration_id == id,
                Order.id == order,
                or_(
                    MessageGroup.seller_id == user,
                    MessageGroup.buyer_id == user,
                    MessageGroup.buyer_organization_id == org,
                ),
            )
            .limit(1)
        )
        rows = select_rows(stmt)
        return rows[0] if rows else None

    def get_integrations_list(self, org):
        return select_with_filter(
            Integration,
            [Integration.organization_id == org, Integration.deleted_at.is_(None)],
        )

    def disable_channel(self, org, id):
        update_one_by_filter(Integration, self._scope(org, id), {"disabled": True})
        org_logger(org).info(f"Integration {id} disabled")

    def enable_channel(self, org, id):
        update_one_by_filter(Integration, self._scope(org, id), {"disabled": False})
        org_logger(org).info(f"Integration {id} enabled")

    def get_posts_for_channel(self, org, id):
        stmt = (
            select(Post.group)
            .where(
                Post.organization_id == org,
                Post.integration_id == id,
                Post.deleted_at.is_(None),
            )
            .group_by(Post.group)
        )
        return select_rows(stmt)

    def delete_channel(self, org, id):
        integration = update_one_by_filter(
            Integration, self._scope(org, id), {"deleted_at": datetime.utcnow()}
        )
        org_logger(org).info(f"Integration {id} deleted")
        return integration

    def check_for_deleted_once_and_update(self, org, page):
        with transaction() as session:
            deleted = (
                session.execute(
                    select(Integration).where(
                        Integration.organization_id == org,
                        Integration.internal_id == page,
                        Integration.deleted_at.isnot(None),
                    )
                )
                .scalars()
                .all()
            )
            for integration in deleted:
                integration.internal_id = make_id(const.INTERNAL_ID_LENGTH)

        if deleted:
            org_logger(org).info(
                f"Released internal id {page} from {len(deleted)} deleted integration(s)"
            )
        return len(deleted)

    def disable_integrations(self, org, total_channels):
        if total_channels <= 0:
            return 0

        with transaction() as session:
            channels = (
                session.execute(
                    select(Integration)
                    .where(
                        Integration.organization_id == org,
                        Integration.disabled.is_(False),
                        Integration.deleted_at.is_(None),
                    )
                    .limit(total_channels)
                    .with_for_update()
                )
                .scalars()
                .all()
            )
            for channel in channels:
                channel.disabled = True

        org_logger(org).info(f"Disabled {len(channels)} integration(s)")
        return len(channels)
