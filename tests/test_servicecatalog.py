"""
Provisioning artifacts data source tests.
"""
from datetime import datetime, timedelta, timezone

import pytest
from botocore.exceptions import ClientError

from blockmap.config import Settings
from blockmap.errors import ConfigurationError, ExternalCallFailure
from blockmap.models.artifact import ProvisioningArtifactDetail
from blockmap.services import servicecatalog
from blockmap.state import ResourceData


class TestFlatten:
    def test_empty_input_yields_nothing(self):
        assert servicecatalog.flatten_provisioning_artifact_details([]) is None

    def test_order_preserved(self):
        details = [
            ProvisioningArtifactDetail(id="pa-2", name="b"),
            ProvisioningArtifactDetail(id="pa-1", name="a"),
        ]
        flat = servicecatalog.flatten_provisioning_artifact_details(details)
        assert [d["id"] for d in flat] == ["pa-2", "pa-1"]

    def test_sparse(self):
        flat = servicecatalog.flatten_provisioning_artifact_detail(ProvisioningArtifactDetail(id="pa-1"))
        assert flat == {"id": "pa-1"}

    def test_false_active_kept(self):
        flat = servicecatalog.flatten_provisioning_artifact_detail(
            ProvisioningArtifactDetail(id="pa-1", active=False)
        )
        assert flat["active"] is False

    def test_all_fields(self):
        detail = ProvisioningArtifactDetail(
            id="pa-1",
            name="v1",
            description="first",
            type="CLOUD_FORMATION_TEMPLATE",
            created_time=datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            active=True,
            guidance="DEFAULT",
        )
        assert servicecatalog.flatten_provisioning_artifact_detail(detail) == {
            "active": True,
            "created_time": "2023-01-02 03:04:05 +0000 UTC",
            "description": "first",
            "guidance": "DEFAULT",
            "id": "pa-1",
            "name": "v1",
            "type": "CLOUD_FORMATION_TEMPLATE",
        }


class TestFormatTime:
    def test_utc(self):
        value = datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert servicecatalog.format_time(value) == "2023-01-02 03:04:05 +0000 UTC"

    def test_fractional_seconds_trimmed(self):
        value = datetime(2023, 1, 2, 3, 4, 5, 250000, tzinfo=timezone.utc)
        assert servicecatalog.format_time(value) == "2023-01-02 03:04:05.25 +0000 UTC"

    def test_naive_treated_as_utc(self):
        assert servicecatalog.format_time(datetime(2023, 1, 2)).endswith("+0000 UTC")

    def test_offset(self):
        tz = timezone(timedelta(hours=2), "CEST")
        assert servicecatalog.format_time(datetime(2023, 1, 2, tzinfo=tz)) == "2023-01-02 00:00:00 +0200 CEST"

    def test_string_passthrough(self):
        assert servicecatalog.format_time("yesterday") == "yesterday"


class TestRead:
    def test_read(self, servicecatalog_client):
        data = ResourceData(servicecatalog.SCHEMA, config={"product_id": "prod-abcdzk7xy33qa"})
        servicecatalog.read(data, servicecatalog_client, Settings())

        assert servicecatalog_client.calls == [
            ("list_provisioning_artifacts", {"AcceptLanguage": "en", "ProductId": "prod-abcdzk7xy33qa"})
        ]
        assert data.id == "prod-abcdzk7xy33qa"
        details = data.to_state()["provisioning_artifact_details"]
        assert [d["name"] for d in details] == ["v1", "v2"]
        assert "description" not in details[1]
        assert details[1]["created_time"] == "2023-06-07 08:09:10.5 +0000 UTC"

    def test_accept_language(self, servicecatalog_client):
        data = ResourceData(
            servicecatalog.SCHEMA,
            config={"product_id": "prod-1", "accept_language": "jp"},
        )
        servicecatalog.read(data, servicecatalog_client, Settings())
        assert servicecatalog_client.calls[0][1]["AcceptLanguage"] == "jp"

    def test_invalid_accept_language(self):
        with pytest.raises(ConfigurationError, match="accept_language"):
            ResourceData(servicecatalog.SCHEMA, config={"product_id": "p", "accept_language": "fr"})

    def test_no_artifacts(self, servicecatalog_client):
        servicecatalog_client.details = []
        data = ResourceData(servicecatalog.SCHEMA, config={"product_id": "prod-1"})
        servicecatalog.read(data, servicecatalog_client, Settings())
        assert data.to_state()["provisioning_artifact_details"] is None
        assert data.id == "prod-1"

    def test_api_error_annotated(self, servicecatalog_client):
        servicecatalog_client.error = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "no such product"}},
            "ListProvisioningArtifacts",
        )
        data = ResourceData(servicecatalog.SCHEMA, config={"product_id": "prod-1"})
        with pytest.raises(ExternalCallFailure) as exc_info:
            servicecatalog.read(data, servicecatalog_client, Settings())
        assert str(exc_info.value).startswith("listing Service Catalog Provisioning Artifacts: ")
        assert isinstance(exc_info.value.cause, ClientError)
        assert data.id == ""
