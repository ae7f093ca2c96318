"""
Fake boto3 clients shaped like the MediaLive and Service Catalog APIs.
"""
import copy
from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError


def _not_found(operation: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "NotFoundException", "Message": "multiplex not found"}},
        operation,
    )


class FakeWaiter:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def wait(self, **kwargs):
        self.client.calls.append((f"wait:{self.name}", kwargs))


class FakeMediaLive:
    def __init__(self):
        self.calls = []
        self.multiplexes = {}
        self.fail_with = {}

    def _maybe_fail(self, operation):
        if operation in self.fail_with:
            raise self.fail_with[operation]

    def add(self, multiplex_id, **fields):
        self.multiplexes[multiplex_id] = {
            "Arn": f"arn:aws:medialive:us-west-2:123456789012:multiplex:{multiplex_id}",
            "Id": multiplex_id,
            "Name": fields.get("Name", "existing"),
            "AvailabilityZones": fields.get("AvailabilityZones", ["us-west-2a", "us-west-2b"]),
            "MultiplexSettings": fields.get("MultiplexSettings", {
                "TransportStreamBitrate": 1000000,
                "TransportStreamId": 1,
                "TransportStreamReservedBitrate": 1,
                "MaximumVideoBufferDelayMilliseconds": 1000,
            }),
            "State": fields.get("State", "IDLE"),
            "Tags": fields.get("Tags", {}),
        }

    def create_multiplex(self, **kwargs):
        self.calls.append(("create_multiplex", kwargs))
        self._maybe_fail("create_multiplex")
        self.add(
            "1234567",
            Name=kwargs["Name"],
            AvailabilityZones=kwargs["AvailabilityZones"],
            MultiplexSettings=dict(kwargs.get("MultiplexSettings", {})),
            Tags=dict(kwargs.get("Tags", {})),
        )
        return {"Multiplex": copy.deepcopy(self.multiplexes["1234567"])}

    def describe_multiplex(self, MultiplexId):
        self.calls.append(("describe_multiplex", {"MultiplexId": MultiplexId}))
        self._maybe_fail("describe_multiplex")
        if MultiplexId not in self.multiplexes:
            raise _not_found("DescribeMultiplex")
        return copy.deepcopy(self.multiplexes[MultiplexId])

    def update_multiplex(self, MultiplexId, **kwargs):
        self.calls.append(("update_multiplex", dict(kwargs, MultiplexId=MultiplexId)))
        current = self.multiplexes[MultiplexId]
        if "Name" in kwargs:
            current["Name"] = kwargs["Name"]
        if "MultiplexSettings" in kwargs:
            current["MultiplexSettings"].update(kwargs["MultiplexSettings"])
        return {"Multiplex": copy.deepcopy(current)}

    def start_multiplex(self, MultiplexId):
        self.calls.append(("start_multiplex", {"MultiplexId": MultiplexId}))
        self.multiplexes[MultiplexId]["State"] = "RUNNING"

    def stop_multiplex(self, MultiplexId):
        self.calls.append(("stop_multiplex", {"MultiplexId": MultiplexId}))
        self.multiplexes[MultiplexId]["State"] = "IDLE"

    def delete_multiplex(self, MultiplexId):
        self.calls.append(("delete_multiplex", {"MultiplexId": MultiplexId}))
        if MultiplexId not in self.multiplexes:
            raise _not_found("DeleteMultiplex")
        del self.multiplexes[MultiplexId]

    def create_tags(self, ResourceArn, Tags):
        self.calls.append(("create_tags", {"ResourceArn": ResourceArn, "Tags": Tags}))
        for m in self.multiplexes.values():
            if m["Arn"] == ResourceArn:
                m["Tags"].update(Tags)

    def delete_tags(self, ResourceArn, TagKeys):
        self.calls.append(("delete_tags", {"ResourceArn": ResourceArn, "TagKeys": TagKeys}))
        for m in self.multiplexes.values():
            if m["Arn"] == ResourceArn:
                for k in TagKeys:
                    m["Tags"].pop(k, None)

    def get_waiter(self, name):
        return FakeWaiter(self, name)

    def call_names(self):
        return [name for name, _ in self.calls]


class FakeServiceCatalog:
    def __init__(self, details=None, error=None):
        self.calls = []
        self.details = details if details is not None else [
            {
                "Id": "pa-4abcdjnxjj6ne",
                "Name": "v1",
                "Description": "first version",
                "Type": "CLOUD_FORMATION_TEMPLATE",
                "CreatedTime": datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
                "Active": False,
                "Guidance": "DEPRECATED",
            },
            {
                "Id": "pa-5abcdjnxjj6ne",
                "Name": "v2",
                "Type": "CLOUD_FORMATION_TEMPLATE",
                "CreatedTime": datetime(2023, 6, 7, 8, 9, 10, 500000, tzinfo=timezone.utc),
                "Active": True,
                "Guidance": "DEFAULT",
            },
        ]
        self.error = error

    def list_provisioning_artifacts(self, **kwargs):
        self.calls.append(("list_provisioning_artifacts", kwargs))
        if self.error is not None:
            raise self.error
        return {"ProvisioningArtifactDetails": copy.deepcopy(self.details)}


class FakeClients:
    """Stands in for ClientFactory."""

    def __init__(self, **clients):
        self.clients = clients

    def get(self, service):
        return self.clients[service]


@pytest.fixture
def medialive_client():
    return FakeMediaLive()


@pytest.fixture
def servicecatalog_client():
    return FakeServiceCatalog()


@pytest.fixture
def clients(medialive_client, servicecatalog_client):
    return FakeClients(medialive=medialive_client, servicecatalog=servicecatalog_client)


@pytest.fixture
def fake_aws(monkeypatch, clients):
    """Route every client the CLI builds to the in-memory fakes."""
    monkeypatch.setattr("blockmap.cli.ClientFactory", lambda settings: clients)
    return clients
