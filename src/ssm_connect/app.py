from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parents[1]))
    from ssm_connect.aws_api import InventoryService, open_session
    from ssm_connect.config import (
        DEFAULT_SETTINGS_PATH,
        ConnectSettings,
        load_settings,
        resolve_profile,
        resolve_region,
    )
    from ssm_connect.errors import NoManagedInstancesError, SsmConnectError
    from ssm_connect.profiles import default_config_path, list_profiles, sorted_profiles
    from ssm_connect.selector import Selector, TextualSelector
    from ssm_connect.session import SessionLauncher
else:
    from .aws_api import InventoryService, open_session
    from .config import (
        DEFAULT_SETTINGS_PATH,
        ConnectSettings,
        load_settings,
        resolve_profile,
        resolve_region,
    )
    from .errors import NoManagedInstancesError, SsmConnectError
    from .profiles import default_config_path, list_profiles, sorted_profiles
    from .selector import Selector, TextualSelector
    from .session import SessionLauncher

logger = logging.getLogger("ssm_connect")

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def run(
    args: argparse.Namespace,
    *,
    selector: Selector,
    settings: ConnectSettings,
    environ: Mapping[str, str] | None = None,
    session_factory: Callable[..., object] = open_session,
    inventory_factory: Callable[..., InventoryService] = InventoryService,
    launcher_factory: Callable[..., SessionLauncher] = SessionLauncher,
    profile_source: Callable[[Path], list[str]] = list_profiles,
) -> int:
    """Resolve profile and region, pick an instance and hand the terminal to the plugin.

    Returns the process exit code. Domain errors propagate to the caller.
    """
    environ = os.environ if environ is None else environ
    region = resolve_region(args.region, environ, settings)
    profile = resolve_profile(args.profile, environ)
    if profile is None:
        profiles = sorted_profiles(profile_source(default_config_path(environ)))
        profile = selector.select_profile(profiles)
        if profile is None:
            logger.debug("Profile selection cancelled.")
            return 0
    logger.info("Using profile %s in %s.", profile, region)

    session = session_factory(profile, region)
    launcher = launcher_factory(session, profile=profile, region=region, plugin=settings.plugin)

    if args.instance:
        return launcher.launch(args.instance)

    inventory = inventory_factory(
        session,
        page_size=settings.page_size,
        max_page_retries=settings.max_page_retries,
    )
    catalog = inventory.build_catalog()
    if not catalog.managed:
        raise NoManagedInstancesError(region)
    logger.debug(
        "Loaded %d managed of %d instances from %s (%s).",
        len(catalog.managed),
        len(catalog.instances),
        region,
        profile,
    )

    selected = selector.select_instance(catalog)
    if not selected:
        logger.debug("Instance selection cancelled.")
        return 0
    return launcher.launch(selected)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    for noisy in ("botocore", "boto3", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Open an SSM shell on a managed EC2 instance")
    parser.add_argument("-p", "--profile", default=None, help="Profile from ~/.aws/config")
    parser.add_argument("-r", "--region", default=None, help="AWS region name, default is eu-west-1")
    parser.add_argument("-i", "--instance", default=None, help="InstanceID for direct connection")
    parser.add_argument(
        "-c",
        "--config",
        default=str(DEFAULT_SETTINGS_PATH),
        help="YAML file with ssm-connect defaults",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings(args.config)
        selector = TextualSelector(
            profile_list_size=settings.profile_list_size,
            instance_list_size=settings.instance_list_size,
        )
        return run(args, selector=selector, settings=settings)
    except SsmConnectError as error:
        logger.error("%s", error)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
