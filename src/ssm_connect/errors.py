from __future__ import annotations


class SsmConnectError(Exception):
    """Base class for errors that end the program with a non-zero exit code."""


class ProfileConfigError(SsmConnectError):
    pass


class AwsSessionError(SsmConnectError):
    pass


class InventoryError(SsmConnectError):
    def __init__(self, message: str, service: str | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.service = service
        self.operation = operation

    def __str__(self) -> str:
        parts = [self.message]
        if self.service:
            parts.append(f"Service: {self.service}")
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        return " | ".join(parts)


class NoManagedInstancesError(InventoryError):
    def __init__(self, region: str | None = None) -> None:
        message = "No available instance"
        if region:
            message = f"{message} in {region}"
        super().__init__(message, service="ssm", operation="DescribeInstanceInformation")


class SessionStartError(SsmConnectError):
    pass


class SessionPluginNotFoundError(SsmConnectError):
    def __init__(self, plugin: str) -> None:
        super().__init__(f"{plugin} not found on PATH; install the Session Manager plugin for the AWS CLI.")
        self.plugin = plugin


class SettingsError(SsmConnectError):
    pass
