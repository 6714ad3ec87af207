"""Interactive choice of a profile and of an instance.

The orchestrator only talks to the :class:`Selector` protocol. The terminal
implementation runs a Textual picker; :class:`ScriptedSelector` answers from
canned search queries with the same matching rules, for tests and
non-interactive use.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from rich.text import Text

from .config import DEFAULT_SETTINGS
from .formatting import COLUMN_SEPARATOR, instance_detail, instance_rows
from .models import Catalog, InstanceRecord, normalize_search_text
from .picker import PickerItem, run_picker

PROFILE_LABEL = "Profile"


class Selector(Protocol):
    def select_profile(self, profiles: Sequence[str]) -> str | None:
        """Return the chosen profile, or None when the user cancels."""
        ...

    def select_instance(self, catalog: Catalog) -> str:
        """Return the chosen instance ID, or an empty string when the user cancels."""
        ...


def normalize_profile_query(value: str) -> str:
    return value.lower()


def profile_matches(query: str, profile: str) -> bool:
    return normalize_profile_query(query) in normalize_profile_query(profile)


def instance_matches(query: str, record: InstanceRecord) -> bool:
    return normalize_search_text(query) in record.search_text


def catalog_label(catalog: Catalog) -> str:
    return f"Online: {catalog.online_count} | Offline: {catalog.offline_count} | Running: {catalog.running_count} "


def profile_items(profiles: Iterable[str]) -> list[PickerItem]:
    return [
        PickerItem(key=profile, prompt=Text(profile), search_text=normalize_profile_query(profile))
        for profile in profiles
    ]


def instance_items(records: Sequence[InstanceRecord]) -> list[PickerItem]:
    items: list[PickerItem] = []
    for record, row in zip(records, instance_rows(records)):
        prompt = Text(COLUMN_SEPARATOR.join(row))
        if not record.is_online:
            prompt.stylize("red")
        items.append(
            PickerItem(
                key=record.instance_id,
                prompt=prompt,
                search_text=record.search_text,
                detail=instance_detail(record),
            )
        )
    return items


class TextualSelector:
    def __init__(
        self,
        *,
        profile_list_size: int = DEFAULT_SETTINGS.profile_list_size,
        instance_list_size: int = DEFAULT_SETTINGS.instance_list_size,
    ) -> None:
        self.profile_list_size = profile_list_size
        self.instance_list_size = instance_list_size

    def select_profile(self, profiles: Sequence[str]) -> str | None:
        return run_picker(
            profile_items(profiles),
            label=PROFILE_LABEL,
            normalize=normalize_profile_query,
            size=self.profile_list_size,
        )

    def select_instance(self, catalog: Catalog) -> str:
        chosen = run_picker(
            instance_items(catalog.managed),
            label=catalog_label(catalog),
            normalize=normalize_search_text,
            size=self.instance_list_size,
        )
        return chosen or ""


class ScriptedSelector:
    """Answer each prompt with the first item matching the next canned query.

    A prompt is cancelled when its queries are used up or nothing matches.
    """

    def __init__(self, profile_queries: Iterable[str] = (), instance_queries: Iterable[str] = ()) -> None:
        self._profile_queries = list(profile_queries)
        self._instance_queries = list(instance_queries)
        self.prompts: list[str] = []

    def select_profile(self, profiles: Sequence[str]) -> str | None:
        self.prompts.append(PROFILE_LABEL)
        if not self._profile_queries:
            return None
        query = self._profile_queries.pop(0)
        return next((profile for profile in profiles if profile_matches(query, profile)), None)

    def select_instance(self, catalog: Catalog) -> str:
        self.prompts.append(catalog_label(catalog))
        if not self._instance_queries:
            return ""
        query = self._instance_queries.pop(0)
        return next(
            (record.instance_id for record in catalog.managed if instance_matches(query, record)),
            "",
        )
