from __future__ import annotations

from dataclasses import dataclass

UNNAMED = "unnamed"
NO_PUBLIC_IP = "N/A"
AGENT_ONLINE = "Online"
AGENT_OFFLINE = "Offline"
STATE_RUNNING = "running"
EXCLUDED_STATES = frozenset({"terminated", "shutting-down"})


@dataclass(slots=True, frozen=True)
class InstanceRecord:
    instance_id: str
    name: str = ""
    computer_name: str = ""
    private_ip: str = ""
    public_ip: str = ""
    instance_state: str = ""
    agent_state: str = ""
    platform_type: str = ""
    platform_name: str = ""

    @property
    def is_online(self) -> bool:
        return self.agent_state == AGENT_ONLINE

    @property
    def search_text(self) -> str:
        return normalize_search_text(
            self.instance_id
            + self.computer_name
            + self.private_ip
            + self.public_ip
            + self.name
            + self.instance_state
            + self.agent_state
            + self.platform_type
            + self.platform_name
        )


@dataclass(slots=True, frozen=True)
class Catalog:
    managed: tuple[InstanceRecord, ...]
    instances: tuple[InstanceRecord, ...] = ()

    @property
    def online_count(self) -> int:
        return sum(1 for record in self.managed if record.is_online)

    @property
    def offline_count(self) -> int:
        return len(self.managed) - self.online_count

    @property
    def running_count(self) -> int:
        return sum(1 for record in self.instances if record.instance_state == STATE_RUNNING)


def agent_state_from_ping(ping_status: str | None) -> str:
    return AGENT_ONLINE if ping_status == AGENT_ONLINE else AGENT_OFFLINE


def normalize_search_text(value: str) -> str:
    return "".join(value.lower().split())
