"""Named groups of tabs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_WORKSPACE_ID = 1


@dataclass
class Workspace:
    id: int
    name: str
    color_hex: str
    tab_ids: list[int] = field(default_factory=list)


class WorkspaceManager:
    """Holds workspaces; the default workspace (id 1) always exists."""

    def __init__(self) -> None:
        self._workspaces: list[Workspace] = [
            Workspace(DEFAULT_WORKSPACE_ID, "Default", "#4d9fff")
        ]
        self._active = DEFAULT_WORKSPACE_ID
        self._next_id = 2

    def _find(self, workspace_id: int) -> Optional[Workspace]:
        return next((ws for ws in self._workspaces if ws.id == workspace_id), None)

    def create(self, name: str, color_hex: str) -> int:
        workspace_id = self._next_id
        self._next_id += 1
        self._workspaces.append(Workspace(workspace_id, name, color_hex))
        return workspace_id

    def rename(self, workspace_id: int, name: str) -> bool:
        ws = self._find(workspace_id)
        if ws is None:
            return False
        ws.name = name
        return True

    def set_color(self, workspace_id: int, color_hex: str) -> bool:
        ws = self._find(workspace_id)
        if ws is None:
            return False
        ws.color_hex = color_hex
        return True

    def delete(self, workspace_id: int) -> bool:
        """Remove a workspace, moving its tabs to the default one."""
        if workspace_id == DEFAULT_WORKSPACE_ID:
            return False
        ws = self._find(workspace_id)
        if ws is None:
            return False
        self._workspaces.remove(ws)
        default = self._find(DEFAULT_WORKSPACE_ID)
        if default is not None:
            default.tab_ids.extend(ws.tab_ids)
        if self._active == workspace_id:
            self._active = DEFAULT_WORKSPACE_ID
        return True

    def activate(self, workspace_id: int) -> bool:
        if self._find(workspace_id) is None:
            return False
        self._active = workspace_id
        return True

    def add_tab(self, workspace_id: int, tab_id: int) -> bool:
        ws = self._find(workspace_id)
        if ws is None:
            return False
        if tab_id not in ws.tab_ids:
            ws.tab_ids.append(tab_id)
        return True

    def remove_tab(self, tab_id: int) -> None:
        for ws in self._workspaces:
            ws.tab_ids = [t for t in ws.tab_ids if t != tab_id]

    def move_tab(self, tab_id: int, target_workspace: int) -> bool:
        self.remove_tab(tab_id)
        return self.add_tab(target_workspace, tab_id)

    def active(self) -> int:
        return self._active

    def active_workspace(self) -> Optional[Workspace]:
        return self._find(self._active)

    def get(self, workspace_id: int) -> Optional[Workspace]:
        return self._find(workspace_id)

    def all(self) -> list[Workspace]:
        return list(self._workspaces)

    def workspace_for_tab(self, tab_id: int) -> Optional[int]:
        return next(
            (ws.id for ws in self._workspaces if tab_id in ws.tab_ids), None
        )