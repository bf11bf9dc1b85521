"""Page, zoom and tab state of the document detail view."""

from typing import Union

from docscope.shared.enums import DetailTab
from .observable import Observable

MIN_ZOOM = 50
MAX_ZOOM = 200
ZOOM_STEP = 10
DEFAULT_ZOOM = 100


class ViewerState(Observable):
    """Current page (1-based, clamped to page_count), zoom percentage and tab."""

    def __init__(self):
        super().__init__()
        self.page = 1
        self.page_count = 1
        self.zoom = DEFAULT_ZOOM
        self.tab = DetailTab.SUMMARY

    def reset(self, page_count: int = 1) -> None:
        """Back to page 1, 100% zoom and the Summary tab."""
        self.page = 1
        self.page_count = max(1, int(page_count))
        self.zoom = DEFAULT_ZOOM
        self.tab = DetailTab.SUMMARY
        self._notify()

    def set_page_count(self, page_count: int) -> None:
        self.page_count = max(1, int(page_count))
        self.page = min(self.page, self.page_count)
        self._notify()

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    def go_to(self, page: int) -> int:
        self.page = max(1, min(self.page_count, int(page)))
        self._notify()
        return self.page

    def next_page(self) -> int:
        return self.go_to(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to(self.page - 1)

    def zoom_in(self) -> int:
        self.zoom = min(MAX_ZOOM, self.zoom + ZOOM_STEP)
        self._notify()
        return self.zoom

    def zoom_out(self) -> int:
        self.zoom = max(MIN_ZOOM, self.zoom - ZOOM_STEP)
        self._notify()
        return self.zoom

    def select_tab(self, tab: Union[DetailTab, str]) -> DetailTab:
        """Switch tab; accepts the enum or its display name."""
        self.tab = DetailTab(tab)
        self._notify()
        return self.tab
