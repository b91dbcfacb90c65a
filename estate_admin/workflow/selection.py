# ================================
# DEPENDENT SELECTION (workflow/selection.py)
# ================================

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from estate_admin.core.exceptions import InvalidSelectionError

logger = logging.getLogger(__name__)

class SelectionState(str, Enum):
    NO_PARENT = "no_parent"
    LOADING_CHILDREN = "loading_children"
    CHILDREN_READY = "children_ready"
    CHILDREN_ERROR = "children_error"

def option_id(option: Any) -> Optional[str]:
    if isinstance(option, dict):
        return option.get("id")
    return getattr(option, "id", None)

def option_parent(option: Any, parent_field: str) -> Optional[str]:
    if isinstance(option, dict):
        return option.get(parent_field)
    return getattr(option, parent_field, None)

class DependentSelection:
    """Child options constrained by a parent choice (project -> scheme).

    Changing the parent clears the child selection and list before any
    network call. A child fetch is applied only if its parent is still the
    selected one and no newer fetch has started since.
    """

    def __init__(
        self,
        fetch_children: Callable[[str], Awaitable[List[Any]]],
        parent_field: str = "project_id",
        name: str = "selection"
    ):
        self.fetch_children = fetch_children
        self.parent_field = parent_field
        self.name = name

        self.parent_id: Optional[str] = None
        self.child_id: Optional[str] = None
        self.children: List[Any] = []
        self.state = SelectionState.NO_PARENT
        self.error: Optional[Exception] = None
        self._generation = 0

    @property
    def is_loading(self) -> bool:
        return self.state == SelectionState.LOADING_CHILDREN

    @property
    def selected_child(self) -> Optional[Any]:
        for child in self.children:
            if option_id(child) == self.child_id:
                return child
        return None

    def _reset(self, parent_id: Optional[str]) -> int:
        self.parent_id = parent_id or None
        self.child_id = None
        self.children = []
        self.error = None
        self._generation += 1
        self.state = SelectionState.LOADING_CHILDREN if self.parent_id else SelectionState.NO_PARENT
        return self._generation

    def _is_current(self, parent_id: str, generation: int) -> bool:
        return parent_id == self.parent_id and generation == self._generation

    async def _load(self, parent_id: str, generation: int) -> List[Any]:
        try:
            children = await self.fetch_children(parent_id)
        except Exception as e:
            if not self._is_current(parent_id, generation):
                logger.debug(f"{self.name}: ignoring failed fetch for stale parent {parent_id}")
                return self.children
            logger.warning(f"{self.name}: failed to load options for {parent_id}: {str(e)}")
            self.error = e
            self.state = SelectionState.CHILDREN_ERROR
            return []

        if not self._is_current(parent_id, generation):
            logger.debug(f"{self.name}: discarding stale options for {parent_id} (current: {self.parent_id})")
            return self.children

        consistent = []
        for child in children or []:
            owner = option_parent(child, self.parent_field)
            if owner is not None and owner != parent_id:
                logger.warning(f"{self.name}: dropping option {option_id(child)} that belongs to {owner}, not {parent_id}")
                continue
            consistent.append(child)

        self.children = consistent
        self.state = SelectionState.CHILDREN_READY
        return self.children

    async def select_parent(self, parent_id: Optional[str]) -> List[Any]:
        """Select a parent and load its children; None clears the pair"""
        generation = self._reset(parent_id)
        if not self.parent_id:
            return []
        return await self._load(self.parent_id, generation)

    def change_parent(self, parent_id: Optional[str]) -> Optional[asyncio.Task]:
        """Event-handler variant: clears now, loads in the background"""
        generation = self._reset(parent_id)
        if not self.parent_id:
            return None
        return asyncio.create_task(self._load(self.parent_id, generation))

    async def retry(self) -> List[Any]:
        return await self.select_parent(self.parent_id)

    def select_child(self, child_id: Optional[str]) -> Optional[Any]:
        if not child_id:
            self.child_id = None
            return None
        if self.state != SelectionState.CHILDREN_READY:
            raise InvalidSelectionError(f"{self.name}: options are not available for the current selection")
        for child in self.children:
            if option_id(child) == child_id:
                self.child_id = child_id
                return child
        raise InvalidSelectionError(f"{self.name}: {child_id} is not a valid option for {self.parent_id}")

class CascadingSelection:
    """Root option list plus one dependent pair, as used by the unit form"""

    def __init__(
        self,
        load_parents: Callable[[], Awaitable[List[Any]]],
        fetch_children: Callable[[str], Awaitable[List[Any]]],
        parent_key: str = "project_id",
        child_key: str = "scheme_id"
    ):
        self.load_parents = load_parents
        self.parent_key = parent_key
        self.child_key = child_key
        self.parents: List[Any] = []
        self.parent_error: Optional[Exception] = None
        self.dependent = DependentSelection(fetch_children, parent_field=parent_key, name=child_key)

    @classmethod
    def for_units(cls, units) -> "CascadingSelection":
        """Project -> scheme pair backed by the purchased-unit dropdown helpers"""
        return cls(units.projects_for_dropdown, units.schemes_for_dropdown)

    async def load(self) -> List[Any]:
        try:
            self.parents = await self.load_parents()
            self.parent_error = None
        except Exception as e:
            logger.warning(f"Failed to load {self.parent_key} options: {str(e)}")
            self.parent_error = e
            self.parents = []
        return self.parents

    async def select_parent(self, parent_id: Optional[str]) -> List[Any]:
        if parent_id and self.parents and parent_id not in [option_id(p) for p in self.parents]:
            raise InvalidSelectionError(f"{parent_id} is not a valid {self.parent_key}")
        return await self.dependent.select_parent(parent_id)

    def select_child(self, child_id: Optional[str]) -> Optional[Any]:
        return self.dependent.select_child(child_id)

    @property
    def parent_id(self) -> Optional[str]:
        return self.dependent.parent_id

    @property
    def child_id(self) -> Optional[str]:
        return self.dependent.child_id

    def values(self) -> Dict[str, Optional[str]]:
        return {self.parent_key: self.parent_id, self.child_key: self.child_id}
