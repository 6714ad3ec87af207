from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option


@dataclass(slots=True, frozen=True)
class PickerItem:
    key: str
    prompt: str | Text
    search_text: str
    detail: str | None = None


class PickerApp(App[str | None]):
    """Searchable single-choice list; returns the chosen item's key or None."""

    CSS = """
    #label {
        height: 1;
        padding: 0 1;
        text-style: bold;
    }

    #search {
        margin: 0 1;
    }

    #options {
        margin: 0 1;
        border: none;
    }

    OptionList > .option-list--option-highlighted {
        color: cyan;
        text-style: bold;
    }

    #detail {
        height: auto;
        padding: 0 1;
    }

    #counter {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("ctrl+c", "cancel", "Cancel", priority=True),
    ]

    def __init__(
        self,
        items: Sequence[PickerItem],
        *,
        label: str,
        normalize: Callable[[str], str] = str.lower,
        size: int = 10,
    ) -> None:
        super().__init__()
        self.choices = list(items)
        self.heading = label
        self.normalize = normalize
        self.list_size = size
        self.shown: list[PickerItem] = list(self.choices)

    def compose(self) -> ComposeResult:
        yield Static(self.heading, id="label", markup=False)
        yield Input(placeholder="Search", id="search")
        yield OptionList(id="options")
        yield Static("", id="detail", markup=False)
        yield Static("", id="counter", markup=False)

    def on_mount(self) -> None:
        self.query_one("#options", OptionList).styles.height = self.list_size
        self._render_options("")
        self.set_focus(self.query_one("#search", Input))

    @on(Input.Changed, "#search")
    def on_search_changed(self, event: Input.Changed) -> None:
        self._render_options(event.value)

    @on(Input.Submitted, "#search")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        self.action_choose()

    @on(OptionList.OptionHighlighted, "#options")
    def on_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        self._update_detail(event.option_index)

    @on(OptionList.OptionSelected, "#options")
    def on_option_selected(self, event: OptionList.OptionSelected) -> None:
        self._choose_index(event.option_index)

    def action_cursor_up(self) -> None:
        self.query_one("#options", OptionList).action_cursor_up()

    def action_cursor_down(self) -> None:
        self.query_one("#options", OptionList).action_cursor_down()

    def action_choose(self) -> None:
        self._choose_index(self.query_one("#options", OptionList).highlighted)

    def action_cancel(self) -> None:
        self.exit(None)

    def filter_items(self, query: str) -> list[PickerItem]:
        needle = self.normalize(query)
        return [item for item in self.choices if needle in item.search_text]

    def _render_options(self, query: str) -> None:
        self.shown = self.filter_items(query)
        option_list = self.query_one("#options", OptionList)
        option_list.clear_options()
        option_list.add_options([Option(item.prompt) for item in self.shown])
        if self.shown:
            option_list.highlighted = 0
        self._update_detail(0 if self.shown else None)

        counter = f" {len(self.shown)}/{len(self.choices)} items" if query else f" {len(self.choices)} items"
        self._set_static("#counter", counter)

    def _update_detail(self, index: int | None) -> None:
        detail = ""
        if index is not None and 0 <= index < len(self.shown):
            detail = self.shown[index].detail or ""
        self._set_static("#detail", detail)

    def _choose_index(self, index: int | None) -> None:
        if index is None or not 0 <= index < len(self.shown):
            return
        self.exit(self.shown[index].key)

    def _set_static(self, selector: str, message: str) -> None:
        try:
            self.query_one(selector, Static).update(message)
        except NoMatches:
            return


def run_picker(
    items: Sequence[PickerItem],
    *,
    label: str,
    normalize: Callable[[str], str] = str.lower,
    size: int = 10,
) -> str | None:
    return PickerApp(items, label=label, normalize=normalize, size=size).run()
