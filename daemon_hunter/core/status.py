from __future__ import annotations

from .control_plane import ControlPlane
from .errors import DaemonHunterError
from .model import Scope, Status


class StatusResolver:
    """
    Runtime status and boot enablement are independent axes.

    - status: not registered -> Unloaded; registered with pid > 0 -> Running; else Loaded
    - enablement: false only when the domain's registry explicitly disables the label
    """

    def __init__(self, control_plane: ControlPlane):
        self._cp = control_plane

    def resolve_status(self, label: str) -> Status:
        try:
            reg = self._cp.query(label)
        except DaemonHunterError:
            return Status.UNLOADED
        if reg is None:
            return Status.UNLOADED
        return Status.RUNNING if reg.is_running else Status.LOADED

    def is_enabled_at_boot(self, label: str, scope: Scope) -> bool:
        try:
            disabled = self._cp.disabled_registry(scope)
        except DaemonHunterError:
            # Fail open: an unreadable registry never reports a job as disabled.
            return True
        return not disabled.get(label, False)
