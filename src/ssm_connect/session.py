from __future__ import annotations

import contextlib
import json
import logging
import shutil
import signal
import subprocess
from collections.abc import Iterator
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import DEFAULT_REGION, DEFAULT_SETTINGS
from .errors import SessionPluginNotFoundError, SessionStartError

logger = logging.getLogger(__name__)

START_SESSION_VERB = "StartSession"


def is_plugin_available(plugin: str = DEFAULT_SETTINGS.plugin) -> bool:
    return shutil.which(plugin) is not None


@contextlib.contextmanager
def ignore_interrupts() -> Iterator[None]:
    """Ignore SIGINT so Ctrl+C reaches the remote shell instead of this process."""
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


class SessionLauncher:
    def __init__(
        self,
        session: boto3.Session,
        *,
        profile: str = "",
        region: str = DEFAULT_REGION,
        plugin: str = DEFAULT_SETTINGS.plugin,
    ) -> None:
        self.profile = profile or ""
        self.region = region or DEFAULT_REGION
        self.plugin = plugin
        self._ssm = session.client("ssm")

    def launch(self, instance_id: str) -> int:
        """Open a shell on ``instance_id`` and block until the plugin exits.

        Returns the plugin's exit code.
        """
        if not is_plugin_available(self.plugin):
            raise SessionPluginNotFoundError(self.plugin)

        descriptor = self.start_session(instance_id)
        command = self.build_plugin_command(descriptor)
        logger.info("Starting session %s on %s.", descriptor.get("SessionId", "?"), instance_id)
        try:
            with ignore_interrupts():
                result = subprocess.run(command, check=False)
        except FileNotFoundError as error:
            raise SessionPluginNotFoundError(self.plugin) from error
        logger.debug("%s exited with code %d.", self.plugin, result.returncode)
        return result.returncode

    def start_session(self, instance_id: str) -> dict[str, Any]:
        try:
            return self._ssm.start_session(Target=instance_id)
        except (BotoCoreError, ClientError) as error:
            raise SessionStartError(f"Cannot start session on {instance_id}: {error}") from error

    def build_plugin_command(self, descriptor: dict[str, Any]) -> list[str]:
        return [
            self.plugin,
            json.dumps(descriptor, default=str),
            self.region,
            START_SESSION_VERB,
            self.profile,
        ]
