from unittest.mock import patch

from ssm_connect.models import Catalog, InstanceRecord
from ssm_connect.selector import (
    ScriptedSelector,
    TextualSelector,
    catalog_label,
    instance_items,
    instance_matches,
    profile_items,
    profile_matches,
)


def test_profile_matches_is_case_insensitive_substring():
    assert profile_matches("PROD", "acme-prod-admin")
    assert not profile_matches("prod admin", "acme-prod-admin")


def test_instance_matches_ignores_case_and_whitespace(catalog):
    web = catalog.managed[0]

    assert instance_matches("WEB - 01", web)
    assert not instance_matches("web 01", web)
    assert instance_matches("amazon linux", web)
    assert instance_matches(" 10.0.1 ", web)
    assert instance_matches("running", web)


def test_catalog_label_counts_online_offline_and_running(catalog):
    assert catalog_label(catalog) == "Online: 1 | Offline: 1 | Running: 2 "


def test_online_and_offline_counts_sum_to_managed_total():
    records = tuple(
        InstanceRecord(instance_id=f"i-{index}", agent_state=state)
        for index, state in enumerate(["Online", "Offline", "Online", "", "Offline"])
    )
    catalog = Catalog(managed=records)

    assert catalog.online_count + catalog.offline_count == len(records)
    assert catalog.online_count == 2


def test_instance_items_pad_prompt_but_search_raw_fields(catalog):
    items = instance_items(catalog.managed)

    prompts = [item.prompt.plain for item in items]
    assert len({len(prompt) for prompt in prompts}) == 1
    assert prompts[1].startswith("db     | db-host")
    assert items[1].search_text == catalog.managed[1].search_text
    assert items[0].key == "i-0aaa1111bbbb2222c"
    assert items[0].detail.startswith("PublicIP: 54.1.2.3 | PlatformType: Linux")


def test_instance_items_style_offline_rows_red(catalog):
    online, offline = instance_items(catalog.managed)

    assert not online.prompt.spans
    assert [str(span.style) for span in offline.prompt.spans] == ["red"]


def test_profile_items_keep_names_as_keys():
    items = profile_items(["Alpha", "beta"])

    assert [(item.key, item.search_text) for item in items] == [("Alpha", "alpha"), ("beta", "beta")]


def test_scripted_selector_picks_first_match_then_cancels(catalog):
    selector = ScriptedSelector(profile_queries=["DEV"], instance_queries=["windows"])

    assert selector.select_profile(["dev-a", "dev-b", "prod"]) == "dev-a"
    assert selector.select_profile(["dev-a"]) is None
    assert selector.select_instance(catalog) == "i-0ddd3333eeee4444f"
    assert selector.select_instance(catalog) == ""
    assert selector.prompts[0] == "Profile"
    assert selector.prompts[2] == catalog_label(catalog)


def test_scripted_selector_without_match_cancels(catalog):
    selector = ScriptedSelector(profile_queries=["zzz"], instance_queries=["zzz"])

    assert selector.select_profile(["dev"]) is None
    assert selector.select_instance(catalog) == ""


def test_textual_selector_maps_cancel_to_empty_instance_id(catalog):
    with patch("ssm_connect.selector.run_picker", return_value=None) as run_picker:
        assert TextualSelector(instance_list_size=7).select_instance(catalog) == ""

    kwargs = run_picker.call_args.kwargs
    assert kwargs["label"] == catalog_label(catalog)
    assert kwargs["size"] == 7


def test_textual_selector_returns_chosen_profile():
    with patch("ssm_connect.selector.run_picker", return_value="prod") as run_picker:
        assert TextualSelector().select_profile(["dev", "prod"]) == "prod"

    assert run_picker.call_args.kwargs["label"] == "Profile"
    assert run_picker.call_args.kwargs["size"] == 10
