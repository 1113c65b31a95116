"""Tab lifecycle and memory budgeting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fortrust.config import PerformanceConfig

_U32_MAX = 2**32 - 1


class TabState(Enum):
    ACTIVE = "active"
    WARM = "warm"
    SUSPENDED = "suspended"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class TabStatus:
    """Lifecycle state with its renderer or snapshot footprint."""

    state: TabState
    renderer_mb: int = 0
    snapshot_kb: int = 0

    def estimated_mb(self) -> int:
        if self.state in (TabState.ACTIVE, TabState.WARM):
            return self.renderer_mb
        if self.state is TabState.SUSPENDED:
            return max(-(-self.snapshot_kb // 1024), 1)
        return 0

    def is_background_renderer(self) -> bool:
        return self.state is TabState.WARM


@dataclass
class Tab:
    id: int
    title: str
    url: str
    status: TabStatus
    pinned: bool = False
    private: bool = False
    workspace_id: Optional[int] = None
    last_active_tick: int = 0
    privacy_blocks: int = 0

    def estimated_mb(self) -> int:
        return self.status.estimated_mb()


@dataclass
class MemoryReport:
    active_tabs: int
    warm_tabs: int
    suspended_tabs: int
    discarded_tabs: int
    total_estimated_mb: int
    budget_mb: int


class TabManager:
    """Opens, activates and closes tabs while keeping memory inside budget."""

    def __init__(self, settings: Optional[PerformanceConfig] = None) -> None:
        self._settings = settings if settings is not None else PerformanceConfig()
        self._tabs: list[Tab] = []
        self._active: Optional[int] = None
        self._next_id = 1
        self._tick = 0

    def _find(self, tab_id: int) -> Optional[Tab]:
        return next((tab for tab in self._tabs if tab.id == tab_id), None)

    def _active_status(self) -> TabStatus:
        return TabStatus(TabState.ACTIVE, renderer_mb=self._settings.max_active_renderer_mb)

    def open_tab(self, url: str, title: str, private: bool = False) -> int:
        self._tick += 1
        self._demote_active_to_warm()
        tab_id = self._next_id
        self._next_id += 1
        self._active = tab_id
        self._tabs.append(
            Tab(
                id=tab_id,
                title=title,
                url=url,
                status=self._active_status(),
                private=private,
                last_active_tick=self._tick,
            )
        )
        self.enforce_memory_policy()
        return tab_id

    def activate(self, tab_id: int) -> bool:
        if self._active == tab_id:
            return True
        tab = self._find(tab_id)
        if tab is None:
            return False
        self._tick += 1
        self._demote_active_to_warm()
        self._active = tab_id
        tab.status = self._active_status()
        tab.last_active_tick = self._tick
        self.enforce_memory_policy()
        return True

    def close_tab(self, tab_id: int) -> bool:
        tab = self._find(tab_id)
        if tab is None:
            return False
        was_active = self._active == tab_id
        self._tabs.remove(tab)
        if was_active:
            self._active = None
            if self._tabs:
                self.activate(self._tabs[-1].id)
        return True

    def navigate_active(self, url: str, title: str) -> bool:
        if self._active is None:
            return False
        return self.navigate_tab(self._active, url, title)

    def navigate_tab(self, tab_id: int, url: str, title: str) -> bool:
        tab = self._find(tab_id)
        if tab is None:
            return False
        tab.url = url
        tab.title = title
        return True

    def record_privacy_block(self, tab_id: int) -> None:
        tab = self._find(tab_id)
        if tab is not None:
            tab.privacy_blocks = min(tab.privacy_blocks + 1, _U32_MAX)

    def tabs(self) -> list[Tab]:
        return list(self._tabs)

    def active_id(self) -> Optional[int]:
        return self._active

    def active_tab(self) -> Optional[Tab]:
        if self._active is None:
            return None
        return self._find(self._active)

    def memory_report(self) -> MemoryReport:
        counts = {state: 0 for state in TabState}
        for tab in self._tabs:
            counts[tab.status.state] += 1
        return MemoryReport(
            active_tabs=counts[TabState.ACTIVE],
            warm_tabs=counts[TabState.WARM],
            suspended_tabs=counts[TabState.SUSPENDED],
            discarded_tabs=counts[TabState.DISCARDED],
            total_estimated_mb=sum(tab.estimated_mb() for tab in self._tabs),
            budget_mb=self._settings.max_total_tab_ram_mb,
        )

    def reorder_tab(self, tab_id: int, new_index: int) -> bool:
        tab = self._find(tab_id)
        if tab is None:
            return False
        old_index = self._tabs.index(tab)
        new_index = min(new_index, len(self._tabs) - 1)
        if old_index != new_index:
            self._tabs.pop(old_index)
            self._tabs.insert(new_index, tab)
        return True

    def enforce_memory_policy(self) -> None:
        self._suspend_stale_background_tabs()
        self._limit_warm_tabs()
        self._fit_total_budget()

    def _demote_active_to_warm(self) -> None:
        tab = self.active_tab()
        if tab is not None:
            tab.status = TabStatus(
                TabState.WARM, renderer_mb=self._settings.max_warm_renderer_mb
            )

    def _suspended_status(self) -> TabStatus:
        return TabStatus(
            TabState.SUSPENDED, snapshot_kb=self._settings.suspended_snapshot_kb
        )

    def _suspend_stale_background_tabs(self) -> None:
        limit = self._settings.suspend_background_after_ticks
        for tab in self._tabs:
            if tab.id == self._active or tab.pinned:
                continue
            if max(self._tick - tab.last_active_tick, 0) >= limit:
                tab.status = self._suspended_status()

    def _limit_warm_tabs(self) -> None:
        warm = sorted(
            (
                tab
                for tab in self._tabs
                if tab.id != self._active and tab.status.is_background_renderer()
            ),
            key=lambda tab: tab.last_active_tick,
        )
        overflow = max(len(warm) - self._settings.warm_tab_limit, 0)
        for tab in warm[:overflow]:
            tab.status = self._suspended_status()

    def _over_budget(self) -> bool:
        total = sum(tab.estimated_mb() for tab in self._tabs)
        return total > self._settings.max_total_tab_ram_mb

    def _evictable(self, tab: Tab) -> bool:
        return tab.id != self._active and not tab.pinned

    def _fit_total_budget(self) -> None:
        while self._over_budget():
            candidate: Optional[Tab] = None
            for tab in self._tabs:
                if not self._evictable(tab) or tab.status.state in (
                    TabState.SUSPENDED,
                    TabState.DISCARDED,
                ):
                    continue
                # Ties go to the later tab.
                if candidate is None or tab.estimated_mb() >= candidate.estimated_mb():
                    candidate = tab
            if candidate is None:
                break
            candidate.status = self._suspended_status()

        while self._over_budget():
            suspended = [
                tab
                for tab in self._tabs
                if self._evictable(tab) and tab.status.state is TabState.SUSPENDED
            ]
            if not suspended:
                break
            coldest = min(suspended, key=lambda tab: tab.last_active_tick)
            coldest.status = TabStatus(TabState.DISCARDED)