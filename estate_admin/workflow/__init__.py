from estate_admin.workflow.lifecycle import DeletePolicy, EntityLifecycleManager, ListingState, ResourcePolicy
from estate_admin.workflow.notifications import LoggingNotifier, Notifier, RecordingNotifier
from estate_admin.workflow.selection import CascadingSelection, DependentSelection, SelectionState

__all__ = [
    "DeletePolicy",
    "EntityLifecycleManager",
    "ListingState",
    "ResourcePolicy",
    "LoggingNotifier",
    "Notifier",
    "RecordingNotifier",
    "CascadingSelection",
    "DependentSelection",
    "SelectionState",
]
