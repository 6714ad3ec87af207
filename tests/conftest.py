"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from ssm_connect.models import Catalog, InstanceRecord


@pytest.fixture
def client_error() -> Callable[[str, str], ClientError]:
    """Build botocore ClientError instances for a given code and operation."""

    def factory(code: str = "ThrottlingException", operation: str = "DescribeInstanceInformation") -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)

    return factory


@pytest.fixture
def ec2_client() -> MagicMock:
    client = MagicMock(name="ec2")
    client.describe_instances.return_value = {"Reservations": []}
    return client


@pytest.fixture
def ssm_client() -> MagicMock:
    client = MagicMock(name="ssm")
    client.describe_instance_information.return_value = {"InstanceInformationList": []}
    return client


@pytest.fixture
def aws_session(ec2_client: MagicMock, ssm_client: MagicMock) -> MagicMock:
    """Provide a boto3 session stand-in whose clients are the ec2/ssm fixtures."""
    session = MagicMock(name="session")
    session.client.side_effect = lambda service, **_: {"ec2": ec2_client, "ssm": ssm_client}[service]
    return session


@pytest.fixture
def catalog() -> Catalog:
    """Two managed instances (one online, one offline) and three EC2 instances."""
    web = InstanceRecord(
        instance_id="i-0aaa1111bbbb2222c",
        name="web-01",
        computer_name="ip-10-0-1-10.eu-west-1.compute.internal",
        private_ip="10.0.1.10",
        public_ip="54.1.2.3",
        instance_state="running",
        agent_state="Online",
        platform_type="Linux",
        platform_name="Amazon Linux 2023",
    )
    db = InstanceRecord(
        instance_id="i-0ddd3333eeee4444f",
        name="db",
        computer_name="db-host",
        private_ip="10.0.2.20",
        public_ip="N/A",
        instance_state="stopped",
        agent_state="Offline",
        platform_type="Windows",
        platform_name="Microsoft Windows Server 2022 Datacenter 10.0.20348",
    )
    return Catalog(
        managed=(web, db),
        instances=(
            InstanceRecord(instance_id=web.instance_id, name="web-01", public_ip="54.1.2.3", instance_state="running"),
            InstanceRecord(instance_id=db.instance_id, name="db", public_ip="N/A", instance_state="stopped"),
            InstanceRecord(instance_id="i-0fff5555", name="unnamed", public_ip="N/A", instance_state="running"),
        ),
    )
