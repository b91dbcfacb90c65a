# ================================
# DEPENDENT SELECTION TESTS (test_selection.py)
# ================================

import asyncio

import pytest

from conftest import scheme_row
from estate_admin.core.exceptions import InvalidSelectionError, UnreachableError
from estate_admin.schemas.business import SchemeOption
from estate_admin.workflow.selection import CascadingSelection, DependentSelection, SelectionState


def option(scheme_id, project_id):
    return SchemeOption(id=scheme_id, scheme_name=scheme_id, project_id=project_id)


class TestDependentSelection:
    """Project -> scheme option loading."""

    def test_select_parent_loads_children(self):
        async def fetch(project_id):
            return [option("s1", project_id)]

        selection = DependentSelection(fetch)
        children = asyncio.run(selection.select_parent("p1"))

        assert selection.state == SelectionState.CHILDREN_READY
        assert [c.id for c in children] == ["s1"]

    def test_parent_change_clears_child_before_fetch(self):
        seen = {}

        async def scenario():
            async def fetch(project_id):
                # Runs after the synchronous reset
                seen[project_id] = (selection.child_id, list(selection.children), selection.state)
                return [option(f"{project_id}-s", project_id)]

            nonlocal selection
            selection = DependentSelection(fetch)
            await selection.select_parent("p1")
            selection.select_child("p1-s")
            await selection.select_parent("p2")

        selection = None
        asyncio.run(scenario())

        assert seen["p2"] == (None, [], SelectionState.LOADING_CHILDREN)
        assert selection.child_id is None

    def test_change_parent_clears_synchronously(self):
        async def scenario():
            async def fetch(project_id):
                return [option(f"{project_id}-s", project_id)]

            selection = DependentSelection(fetch)
            await selection.select_parent("p1")
            selection.select_child("p1-s")

            task = selection.change_parent("p2")
            cleared = (selection.child_id, selection.children, selection.state)
            await task
            return cleared, selection

        cleared, selection = asyncio.run(scenario())

        assert cleared == (None, [], SelectionState.LOADING_CHILDREN)
        assert [c.id for c in selection.children] == ["p2-s"]

    def test_stale_response_discarded(self):
        """A slow fetch for A must not overwrite B's options."""

        async def scenario():
            release_a = asyncio.Event()

            async def fetch(project_id):
                if project_id == "A":
                    await release_a.wait()
                return [option(f"{project_id}-s", project_id)]

            selection = DependentSelection(fetch)
            slow = asyncio.create_task(selection.select_parent("A"))
            await asyncio.sleep(0)
            await selection.select_parent("B")
            release_a.set()
            await slow
            return selection

        selection = asyncio.run(scenario())

        assert selection.parent_id == "B"
        assert [c.id for c in selection.children] == ["B-s"]
        assert selection.state == SelectionState.CHILDREN_READY

    def test_same_parent_reselected_uses_latest_fetch(self):
        calls = []

        async def scenario():
            release_first = asyncio.Event()

            async def fetch(project_id):
                calls.append(project_id)
                if len(calls) == 1:
                    await release_first.wait()
                    return [option("old", project_id)]
                return [option("new", project_id)]

            selection = DependentSelection(fetch)
            first = asyncio.create_task(selection.select_parent("A"))
            await asyncio.sleep(0)
            await selection.select_parent("A")
            release_first.set()
            await first
            return selection

        selection = asyncio.run(scenario())

        assert [c.id for c in selection.children] == ["new"]

    def test_failure_then_retry(self):
        attempts = []

        async def fetch(project_id):
            attempts.append(project_id)
            if len(attempts) == 1:
                raise UnreachableError()
            return [option("s1", project_id)]

        selection = DependentSelection(fetch)
        asyncio.run(selection.select_parent("p1"))

        assert selection.state == SelectionState.CHILDREN_ERROR
        assert isinstance(selection.error, UnreachableError)

        asyncio.run(selection.retry())

        assert selection.state == SelectionState.CHILDREN_READY
        assert selection.error is None

    def test_foreign_children_dropped(self):
        async def fetch(project_id):
            return [option("mine", project_id), option("theirs", "other")]

        selection = DependentSelection(fetch)
        asyncio.run(selection.select_parent("p1"))

        assert [c.id for c in selection.children] == ["mine"]

    def test_select_child_validation(self):
        async def fetch(project_id):
            return [option("s1", project_id)]

        selection = DependentSelection(fetch)

        with pytest.raises(InvalidSelectionError):
            selection.select_child("s1")

        asyncio.run(selection.select_parent("p1"))

        with pytest.raises(InvalidSelectionError):
            selection.select_child("s9")
        assert selection.select_child("s1").project_id == "p1"

    def test_clearing_parent(self):
        async def fetch(project_id):
            return [option("s1", project_id)]

        selection = DependentSelection(fetch)
        asyncio.run(selection.select_parent("p1"))
        asyncio.run(selection.select_parent(None))

        assert selection.state == SelectionState.NO_PARENT
        assert selection.children == []


class TestCascadingSelection:

    def test_units_dropdowns(self, console, backend):
        backend.on("GET", "read", "/projects/list", json={"projects": [{"id": "p1", "title": "Tower"}]})
        backend.on("GET", "read", "/investment-schemes/project", json={"schemes": [
            scheme_row("s1", "p1"),
            scheme_row("s2", "p1", is_active=False),
        ]})
        selection = console.unit_selection()

        async def scenario():
            await selection.load()
            await selection.select_parent("p1")
            selection.select_child("s1")

        asyncio.run(scenario())

        assert selection.values() == {"project_id": "p1", "scheme_id": "s1"}
        assert [s.id for s in selection.dependent.children] == ["s1"]

    def test_unknown_project_rejected(self):
        async def projects():
            return [{"id": "p1"}]

        async def schemes(project_id):
            return []

        selection = CascadingSelection(projects, schemes)
        asyncio.run(selection.load())

        with pytest.raises(InvalidSelectionError):
            asyncio.run(selection.select_parent("p9"))

    def test_project_list_failure_is_logged_only(self):
        async def projects():
            raise UnreachableError()

        async def schemes(project_id):
            return []

        selection = CascadingSelection(projects, schemes)
        parents = asyncio.run(selection.load())

        assert parents == []
        assert isinstance(selection.parent_error, UnreachableError)
