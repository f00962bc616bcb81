"""Tests for the session helpers in app.lib.query."""

import pytest
from sqlalchemy.exc import IntegrityError

from app.lib.query import select_with_filter, select_with_filter_one, transaction
from app.models.integration import Integration


class TestTransaction:
    def test_commits_on_success(self, make_integration):
        integration = make_integration()

        with transaction() as session:
            row = session.get(Integration, integration.id)
            row.name = "Renamed"

        stored = select_with_filter_one(Integration, [Integration.id == integration.id])
        assert stored.name == "Renamed"

    def test_application_error_rolls_back_and_reraises(self, make_integration):
        integration = make_integration()

        with pytest.raises(ValueError):
            with transaction() as session:
                row = session.get(Integration, integration.id)
                row.name = "Renamed"
                raise ValueError("upload failed")

        stored = select_with_filter_one(Integration, [Integration.id == integration.id])
        assert stored.name == "My Page"

    def test_database_error_rolls_back_and_reraises(self, make_integration):
        integration = make_integration()

        with pytest.raises(IntegrityError):
            with transaction() as session:
                session.get(Integration, integration.id).name = "Renamed"
                session.add(
                    Integration(
                        name="Duplicate",
                        type="social",
                        provider_identifier="facebook",
                        token="token",
                        refresh_token="",
                        internal_id=integration.internal_id,
                        organization_id=integration.organization_id,
                    )
                )
                session.flush()

        rows = select_with_filter(
            Integration, [Integration.organization_id == integration.organization_id]
        )
        assert [row.name for row in rows] == ["My Page"]
