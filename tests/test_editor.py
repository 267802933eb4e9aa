"""Tests for the menu editor."""

import json
import logging

import pytest
from menustage.config import EditorConfig
from menustage.core.item import MenuItem
from menustage.editor import EditorHandlers, MenuEditor
from menustage.reorder import ListReorderable

from tests.conftest import depths_of, make_editor, nested_chain


def _flat(depths: list[int]) -> list[dict]:
    """Build a nested document whose flattened depths match ``depths``."""
    document: list[dict] = []
    stack: list[list[dict]] = [document]
    for i, depth in enumerate(depths):
        node: dict = {"text": chr(ord("A") + i)}
        del stack[depth + 1 :]
        stack[depth].append(node)
        node["submenu"] = []
        stack.append(node["submenu"])
    return document


class TestInitialization:
    """Tests for MenuEditor construction."""

    def test_loads_initial_menus(self, sample_menu: list[dict]) -> None:
        """Initial menus are flattened with their depths."""
        editor = make_editor(sample_menu)

        assert [item.text for item in editor.items] == [
            "Home",
            "Products",
            "Shoes",
            "Bags",
            "Backpacks",
            "Contact",
        ]
        assert depths_of(editor.items) == [0, 0, 1, 1, 2, 0]

    def test_missing_reorderable_disables_editor(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Without a reorderable list the editor logs once and does nothing."""
        with caplog.at_level(logging.ERROR):
            editor = MenuEditor(EditorConfig(), menus=[{"text": "A"}])

        assert not editor.enabled
        assert len(editor) == 0
        assert editor.add([{"text": "B"}]) is False
        assert editor.flush() is False
        assert editor.data("object") == []
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "reorderable" in errors[0].getMessage()

    def test_reorderable_bound_to_one_editor(self) -> None:
        """A reorderable list cannot serve two editors."""
        reorderable = ListReorderable()
        editor = MenuEditor(EditorConfig(), reorderable=reorderable)
        editor.flush()

        with pytest.raises(ValueError, match="already bound"):
            MenuEditor(EditorConfig(), reorderable=reorderable)

    def test_flush_attaches_reorderable(self) -> None:
        """The drag capability is bound on first flush, not at construction."""
        reorderable = ListReorderable()
        editor = MenuEditor(EditorConfig(), reorderable=reorderable)

        assert not reorderable.attached
        editor.flush()
        assert reorderable.attached


class TestAdd:
    """Tests for add(), load() and flush()."""

    def test_empty_payload_rejected(self) -> None:
        """Empty payloads return False."""
        editor = make_editor()

        assert editor.add([]) is False
        assert editor.add(None) is False

    def test_invalid_payload_rejected_without_changes(self) -> None:
        """A malformed node rejects the whole payload."""
        editor = make_editor([{"text": "A"}])

        assert editor.add([{"text": "B"}, "oops"]) is False
        assert [item.text for item in editor.items] == ["A"]

    def test_add_at_depth(self) -> None:
        """Items can be added below the root."""
        editor = make_editor([{"text": "A"}])

        assert editor.add([{"text": "B", "submenu": [{"text": "C"}]}], depth=1)
        editor.flush()

        assert depths_of(editor.items) == [0, 1, 2]

    def test_reconcile_deferred_until_flush(self) -> None:
        """Affordances are stale until flush()."""
        editor = make_editor([{"text": "A"}])

        editor.add([{"text": "B"}])

        assert editor.items[0].affordances.can_move_down is False
        editor.flush()
        assert editor.items[0].affordances.can_move_down is True

    def test_deeper_than_max_depth_is_clamped(self) -> None:
        """Loaded depths beyond max_depth are clamped on flush."""
        editor = make_editor(_flat([0, 1, 2, 3]), max_depth=2)

        assert depths_of(editor.items) == [0, 1, 2, 2]

    def test_on_menu_added_called_per_item(self) -> None:
        """The added handler fires once per inserted item, nested included."""
        added: list[str] = []
        handlers = EditorHandlers(on_menu_added=lambda item: added.append(item.text))

        make_editor([{"text": "A", "submenu": [{"text": "B"}]}], handlers=handlers)

        assert added == ["A", "B"]

    def test_load_is_add_at_root(self) -> None:
        """load() appends at depth 0."""
        editor = make_editor()

        assert editor.load([{"text": "A"}, {"text": "B"}])
        editor.flush()

        assert depths_of(editor.items) == [0, 0]

    def test_deeply_nested_payload_accepted(self) -> None:
        """Deep nesting is clamped to max_depth instead of failing."""
        editor = make_editor(max_depth=2)

        assert editor.add(nested_chain(1500))
        editor.flush()

        assert len(editor) == 1500
        assert depths_of(editor.items)[:4] == [0, 1, 2, 2]
        assert max(depths_of(editor.items)) == 2

    def test_wide_parent_keeps_its_children(self) -> None:
        """Every child of a parent with many children stays under it."""
        children = [{"text": f"Child {i}"} for i in range(150)]
        editor = make_editor([{"text": "Root", "submenu": children}])

        assert depths_of(editor.items) == [0] + [1] * 150
        assert editor.items[150].affordances.outdent_label == "Out from Root"
        data = editor.data("object")
        assert len(data) == 1
        assert len(data[0]["submenu"]) == 150

    def test_export_settles_pending_add(self) -> None:
        """data() and state() reconcile an add that was not flushed yet."""
        editor = make_editor(max_depth=1)

        editor.add([{"text": "A", "submenu": [{"text": "B", "submenu": [{"text": "C"}]}]}])

        assert editor.data("object") == [
            {
                "text": "A",
                "type": "link",
                "submenu": [{"text": "B", "type": "link"}, {"text": "C", "type": "link"}],
            },
        ]
        state = editor.state()
        assert [entry["depth"] for entry in state] == [0, 1, 1]
        assert state[0]["affordances"]["canMoveDown"] is True


class TestMoves:
    """Tests for move_up() and move_down()."""

    def test_move_up_swaps_with_previous(self) -> None:
        """An item swaps places with its predecessor."""
        editor = make_editor([{"text": "A"}, {"text": "B"}])

        assert editor.move_up(1)

        assert [item.text for item in editor.items] == ["B", "A"]

    def test_move_up_first_item_refused(self) -> None:
        """The first item cannot move up."""
        editor = make_editor([{"text": "A"}, {"text": "B"}])

        assert editor.move_up(0) is False

    def test_move_down_last_item_refused(self) -> None:
        """The last item cannot move down."""
        editor = make_editor([{"text": "A"}, {"text": "B"}])

        assert editor.move_down(1) is False

    def test_moving_child_to_front_resets_depth(self) -> None:
        """A child moved to the first position becomes top-level."""
        editor = make_editor(_flat([0, 1]))

        assert editor.move_up(1)

        assert [item.text for item in editor.items] == ["B", "A"]
        assert depths_of(editor.items) == [0, 0]


class TestIndentOutdent:
    """Tests for indent() and outdent()."""

    def test_outdent_second_child(self) -> None:
        """Outdenting the second child makes it top-level."""
        editor = make_editor(_flat([0, 1, 1]))

        assert editor.outdent(2)

        assert depths_of(editor.items) == [0, 1, 0]
        assert editor.items[2].affordances.can_outdent is False

    def test_indent_single_item_refused(self) -> None:
        """A lone item has nothing to go under."""
        editor = make_editor([{"text": "A"}])

        assert editor.indent(0) is False
        assert depths_of(editor.items) == [0]

    def test_indent_under_previous_sibling(self) -> None:
        """Indenting makes the item the last child of its previous sibling."""
        editor = make_editor(_flat([0, 1, 1]))

        assert editor.indent(2)

        assert depths_of(editor.items) == [0, 1, 2]
        assert editor.data("object") == [
            {
                "text": "A",
                "type": "link",
                "submenu": [
                    {
                        "text": "B",
                        "type": "link",
                        "submenu": [{"text": "C", "type": "link"}],
                    },
                ],
            },
        ]

    def test_indent_at_max_depth_refused(self) -> None:
        """Indenting never goes past max_depth."""
        editor = make_editor(_flat([0, 1, 2, 2]), max_depth=2)

        assert editor.indent(3) is False
        assert depths_of(editor.items) == [0, 1, 2, 2]

    def test_outdent_reparents_following_children(self) -> None:
        """Children of an outdented item follow it."""
        editor = make_editor(_flat([0, 1, 2]))

        assert editor.outdent(1)

        assert depths_of(editor.items) == [0, 0, 1]

    def test_outdent_top_level_refused(self) -> None:
        """Top-level items cannot be outdented."""
        editor = make_editor([{"text": "A"}, {"text": "B"}])

        assert editor.outdent(1) is False


class TestRemove:
    """Tests for remove()."""

    def test_remove_item(self) -> None:
        """Removing drops the item and notifies the handler."""
        removed: list[bool] = []
        handlers = EditorHandlers(
            on_confirm_remove=lambda item: True,
            on_menu_removed=lambda: removed.append(True),
        )
        editor = make_editor([{"text": "A"}, {"text": "B"}], handlers=handlers)

        assert editor.remove(0)

        assert [item.text for item in editor.items] == ["B"]
        assert removed == [True]

    def test_remove_vetoed(self) -> None:
        """A denied confirmation leaves the menu untouched."""
        handlers = EditorHandlers(on_confirm_remove=lambda item: False)
        editor = make_editor([{"text": "A"}], handlers=handlers)

        assert editor.remove(0) is False
        assert len(editor) == 1

    def test_no_confirmation_when_disabled(self) -> None:
        """The confirmation hook is skipped when confirm_remove is off."""
        asked: list[MenuItem] = []

        def confirm(item: MenuItem) -> bool:
            asked.append(item)
            return False

        handlers = EditorHandlers(on_confirm_remove=confirm)
        editor = make_editor([{"text": "A"}], handlers=handlers, confirm_remove=False)

        assert editor.remove(0)
        assert asked == []

    def test_removing_parent_reparents_children(self) -> None:
        """Children of a removed item move under the preceding item."""
        editor = make_editor(_flat([0, 0, 1]))

        assert editor.remove(1)

        assert depths_of(editor.items) == [0, 1]
        assert editor.data("object") == [
            {"text": "A", "type": "link", "submenu": [{"text": "C", "type": "link"}]},
        ]

    def test_remove_invalid_index(self) -> None:
        """Out-of-range indices are refused."""
        editor = make_editor([{"text": "A"}])

        assert editor.remove(3) is False


class TestDragDrop:
    """Tests for drag_drop() via the reorderable list."""

    def test_drop_between_siblings_snaps_depth(self) -> None:
        """Dropping between two depth-2 items moves the item to depth 2."""
        reorderable = ListReorderable()
        editor = MenuEditor(
            EditorConfig(),
            EditorHandlers(),
            reorderable,
            menus=_flat([0, 1, 2, 2, 0]),
        )
        editor.flush()

        assert reorderable.move(4, 3)

        assert [item.text for item in editor.items] == ["A", "B", "C", "E", "D"]
        assert depths_of(editor.items) == [0, 1, 2, 2, 2]

    def test_drop_leaves_children_under_previous_item(self) -> None:
        """Moving a parent away leaves its former children to the item before them."""
        editor = make_editor(_flat([0, 0, 1, 2]))

        assert editor.drag_drop(1, 3)

        assert [item.text for item in editor.items] == ["A", "C", "D", "B"]
        assert depths_of(editor.items) == [0, 1, 2, 0]

    def test_invalid_positions_rejected(self) -> None:
        """Moves outside the sequence are refused."""
        editor = make_editor([{"text": "A"}, {"text": "B"}])

        assert editor.drag_drop(0, 5) is False
        assert editor.drag_drop(-1, 0) is False


class TestDispatch:
    """Tests for dispatch() and display actions."""

    def test_dispatch_named_actions(self) -> None:
        """Action names map to editor operations."""
        editor = make_editor([{"text": "A"}, {"text": "B"}])

        assert editor.dispatch(1, "child-in")
        assert depths_of(editor.items) == [0, 1]
        assert editor.dispatch(1, "child-out")
        assert depths_of(editor.items) == [0, 0]

    def test_unknown_action(self) -> None:
        """Unknown actions are refused."""
        editor = make_editor([{"text": "A"}])

        assert editor.dispatch(0, "explode") is False

    def test_toggle_and_cancel(self) -> None:
        """toggle opens the edit panel, cancel closes it."""
        editor = make_editor([{"text": "A"}])

        assert editor.dispatch(0, "toggle")
        assert editor.items[0].expanded
        assert editor.dispatch(0, "cancel")
        assert not editor.items[0].expanded


class TestFields:
    """Tests for update_field() and fields_for()."""

    def test_update_text_refreshes_labels(self) -> None:
        """Renaming a parent updates its children's labels."""
        editor = make_editor(_flat([0, 1]))

        assert editor.update_field(0, "text", "Shop")

        assert editor.items[1].affordances.outdent_label == "Out from Shop"

    def test_update_rejects_bad_values(self) -> None:
        """Unknown fields and wrong types are refused."""
        editor = make_editor([{"text": "A"}])

        assert editor.update_field(0, "depth", 3) is False
        assert editor.update_field(0, "new_tab", "yes") is False
        assert editor.update_field(0, "text", 5) is False

    def test_category_hides_url(self) -> None:
        """Categories have no url field unless always_show_url is set."""
        editor = make_editor([{"text": "A", "type": "category"}])

        assert editor.fields_for(0) == ["text", "new_tab"]

    def test_always_show_url(self) -> None:
        """always_show_url shows the url field for categories too."""
        editor = make_editor([{"text": "A", "type": "category"}], always_show_url=True)

        assert editor.fields_for(0) == ["text", "url", "new_tab"]

    def test_custom_template(self) -> None:
        """A template handler decides the fields."""
        handlers = EditorHandlers(template=lambda item: ["text", "icon"])
        editor = make_editor([{"text": "A"}], handlers=handlers)

        assert editor.fields_for(0) == ["text", "icon"]


class TestQuickAdd:
    """Tests for quick_add() and add_from_inserter()."""

    def test_quick_add_focuses_new_item(self) -> None:
        """The inline add button appends an opened Untitled link."""
        editor = make_editor([{"text": "A"}])

        assert editor.quick_add()

        item = editor.items[-1]
        assert item.text == "Untitled"
        assert item.expanded
        assert editor.focused_index == 1

    def test_quick_add_without_focus(self) -> None:
        """focus_after_add=False leaves the new item closed."""
        editor = make_editor(focus_after_add=False)

        assert editor.quick_add()

        assert not editor.items[0].expanded
        assert editor.focused_index is None

    def test_quick_add_disabled(self) -> None:
        """Quick add is refused when inline_addmenu is off."""
        editor = make_editor(inline_addmenu=False)

        assert editor.quick_add() is False

    def test_inserter_drops_entries_without_text(self) -> None:
        """Entries without text are skipped and the panel type applied."""
        editor = make_editor()

        assert editor.add_from_inserter(
            [{"text": "Docs", "url": "/docs"}, {"text": "", "url": "/x"}],
            menu_type="custom",
        )

        assert [(item.text, item.type) for item in editor.items] == [("Docs", "custom")]

    def test_inserter_collector_hook(self) -> None:
        """The collector hook may rewrite the collected entries."""
        handlers = EditorHandlers(
            collect_add_data=lambda data: [{**entry, "url": "/hooked"} for entry in data],
        )
        editor = make_editor(handlers=handlers)

        assert editor.add_from_inserter([{"text": "Docs"}])

        assert editor.items[0].url == "/hooked"

    def test_inserter_nothing_to_add(self) -> None:
        """An empty selection adds nothing."""
        editor = make_editor()

        assert editor.add_from_inserter([{"url": "/x"}]) is False


class TestData:
    """Tests for data() export."""

    def test_string_format(self, sample_menu: list[dict]) -> None:
        """The string form is the JSON encoding of the object form."""
        editor = make_editor(sample_menu)

        assert json.loads(editor.data("string")) == editor.data("object")

    def test_export_matches_input(self, sample_menu: list[dict]) -> None:
        """Exporting a loaded menu reproduces its structure."""
        editor = make_editor(sample_menu)

        data = editor.data("object")

        assert [node["text"] for node in data] == ["Home", "Products", "Contact"]
        assert [child["text"] for child in data[1]["submenu"]] == ["Shoes", "Bags"]
        assert data[1]["submenu"][1]["submenu"][0]["text"] == "Backpacks"
        assert "submenu" not in data[0]
        assert data[2]["newTab"] is True

    def test_state_lists_affordances(self) -> None:
        """state() exposes depths and affordances per position."""
        editor = make_editor(_flat([0, 1]))

        state = editor.state()

        assert [entry["depth"] for entry in state] == [0, 1]
        assert state[1]["affordances"]["outdentLabel"] == "Out from A"
        assert state[0]["affordances"]["canMoveUp"] is False

    def test_default_format_is_object(self, sample_menu: list[dict]) -> None:
        """data() without a format returns the nested document."""
        editor = make_editor(sample_menu)

        assert editor.data() == editor.data("object")
