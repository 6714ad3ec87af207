from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import DEFAULT_REGION, DEFAULT_SETTINGS
from .errors import AwsSessionError, InventoryError
from .models import (
    EXCLUDED_STATES,
    NO_PUBLIC_IP,
    UNNAMED,
    Catalog,
    InstanceRecord,
    agent_state_from_ping,
)

logger = logging.getLogger(__name__)


def open_session(profile: str | None, region: str = DEFAULT_REGION) -> boto3.Session:
    """Create the single authenticated session used for every call of a run.

    Assume-role profiles that declare ``mfa_serial`` make botocore prompt for
    the token code on the terminal when credentials are first needed.
    """
    try:
        return boto3.Session(profile_name=profile or None, region_name=region or DEFAULT_REGION)
    except BotoCoreError as error:
        raise AwsSessionError(f"Cannot open AWS session for profile {profile!r}: {error}") from error


class InventoryService:
    def __init__(
        self,
        session: boto3.Session,
        *,
        page_size: int = DEFAULT_SETTINGS.page_size,
        max_page_retries: int = DEFAULT_SETTINGS.max_page_retries,
    ) -> None:
        self.page_size = page_size
        self.max_page_retries = max_page_retries
        self._ec2 = session.client("ec2")
        self._ssm = session.client("ssm")

    def build_catalog(self) -> Catalog:
        instances = self.list_all_instances()
        managed = self.list_managed_instances(instances)
        return Catalog(managed=tuple(managed), instances=tuple(instances))

    def list_all_instances(self) -> list[InstanceRecord]:
        try:
            response = self._ec2.describe_instances()
        except (BotoCoreError, ClientError) as error:
            raise InventoryError(str(error), service="ec2", operation="DescribeInstances") from error

        records: list[InstanceRecord] = []
        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                record = self._to_record(instance)
                if record.instance_state in EXCLUDED_STATES:
                    continue
                records.append(record)
        logger.debug("Loaded %d EC2 instances.", len(records))
        return records

    def list_managed_instances(self, instances: Sequence[InstanceRecord] = ()) -> list[InstanceRecord]:
        """List every SSM managed instance and enrich it from the EC2 listing."""
        kwargs: dict[str, Any] = {"MaxResults": self.page_size}
        managed: list[InstanceRecord] = []
        failures = 0
        while True:
            try:
                page = self._ssm.describe_instance_information(**kwargs)
            except (BotoCoreError, ClientError) as error:
                failures += 1
                if failures > self.max_page_retries:
                    raise InventoryError(
                        f"{error} (gave up after {failures} attempts)",
                        service="ssm",
                        operation="DescribeInstanceInformation",
                    ) from error
                logger.warning(
                    "Listing managed instances failed (attempt %d of %d): %s",
                    failures,
                    self.max_page_retries + 1,
                    error,
                )
                continue

            failures = 0
            managed.extend(self._to_managed_record(item) for item in page.get("InstanceInformationList", []))
            next_token = page.get("NextToken")
            if not next_token:
                break
            kwargs["NextToken"] = next_token

        records = merge_managed(managed, instances)
        logger.debug("Loaded %d managed instances.", len(records))
        return records

    @staticmethod
    def _to_record(instance: dict[str, Any]) -> InstanceRecord:
        return InstanceRecord(
            instance_id=instance["InstanceId"],
            name=_tag_value(instance.get("Tags", []), "Name", default=UNNAMED),
            public_ip=instance.get("PublicIpAddress") or NO_PUBLIC_IP,
            instance_state=instance.get("State", {}).get("Name", ""),
        )

    @staticmethod
    def _to_managed_record(item: dict[str, Any]) -> InstanceRecord:
        return InstanceRecord(
            instance_id=item["InstanceId"],
            computer_name=item.get("ComputerName", ""),
            private_ip=item.get("IPAddress", ""),
            agent_state=agent_state_from_ping(item.get("PingStatus")),
            platform_type=item.get("PlatformType", ""),
            platform_name=f"{item.get('PlatformName', '')} {item.get('PlatformVersion', '')}",
        )


def merge_managed(
    managed: Iterable[InstanceRecord],
    instances: Iterable[InstanceRecord],
) -> list[InstanceRecord]:
    """Backfill name, public address and state of managed records by instance ID.

    Managed records without an EC2 counterpart keep empty values. Repeated
    instance IDs are kept once.
    """
    by_id = {record.instance_id: record for record in instances}
    merged: list[InstanceRecord] = []
    seen: set[str] = set()
    for record in managed:
        if record.instance_id in seen:
            continue
        seen.add(record.instance_id)
        match = by_id.get(record.instance_id)
        if match is not None:
            record = replace(
                record,
                name=match.name,
                public_ip=match.public_ip,
                instance_state=match.instance_state,
            )
        merged.append(record)
    return merged


def _tag_value(tags: Iterable[dict[str, str]], key: str, default: str = "") -> str:
    for tag in tags:
        if tag.get("Key") == key:
            return tag.get("Value", default)
    return default
