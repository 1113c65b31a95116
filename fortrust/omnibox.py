"""Address bar state: suggestions, keyboard selection and input normalisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import quote


class SuggestionKind(Enum):
    HISTORY = "history"
    BOOKMARK = "bookmark"
    SEARCH = "search"
    URL = "url"


@dataclass
class SuggestionItem:
    kind: SuggestionKind
    text: str
    url: str


def private_search_url(query: str) -> str:
    """The private search URL for ``query``."""
    return f"fortrust://search?q={quote(query.strip(), safe='')}"


def normalize_input(text: str) -> str:
    """Turn typed input into a URL: keep URLs, add https:// to hosts, search otherwise."""
    trimmed = text.strip()
    if trimmed.startswith(("http://", "https://", "fortrust://", "about:")):
        return trimmed
    if "." in trimmed and " " not in trimmed:
        return f"https://{trimmed}"
    return private_search_url(trimmed)


@dataclass
class OmniboxState:
    """Text, focus and suggestion list of the address bar."""

    text: str = ""
    focused: bool = False
    suggestions: list[SuggestionItem] = field(default_factory=list)
    selected_suggestion: int = -1
    show_suggestions: bool = False

    def clear_suggestions(self) -> None:
        self.suggestions.clear()
        self.selected_suggestion = -1
        self.show_suggestions = False

    def update_suggestions(self, history_entries: Iterable[SuggestionItem]) -> None:
        """Rebuild suggestions for the current text from ``history_entries``."""
        query = self.text.strip().lower()
        if not query or not self.focused:
            self.clear_suggestions()
            return

        trimmed = self.text.strip()
        self.suggestions = [
            SuggestionItem(
                SuggestionKind.SEARCH, f'Search for "{trimmed}"', private_search_url(trimmed)
            )
        ]
        self.suggestions.extend(
            SuggestionItem(SuggestionKind.HISTORY, entry.text, entry.url)
            for entry in history_entries
            if query in entry.url.lower() or query in entry.text.lower()
        )

        if "." in self.text and " " not in self.text:
            if self.text.startswith(("http://", "https://")):
                url = self.text
            else:
                url = f"https://{self.text}"
            self.suggestions.append(SuggestionItem(SuggestionKind.URL, url, url))

        self.show_suggestions = bool(self.suggestions)
        self.selected_suggestion = 0 if self.show_suggestions else -1

    def select_next(self) -> None:
        if self.show_suggestions:
            self.selected_suggestion = min(
                self.selected_suggestion + 1, len(self.suggestions) - 1
            )

    def select_previous(self) -> None:
        if self.show_suggestions:
            self.selected_suggestion = max(self.selected_suggestion - 1, 0)

    def submit(self) -> Optional[str]:
        """Enter: go to the selected suggestion, or to the typed input."""
        navigate: Optional[str] = None
        if self.show_suggestions and 0 <= self.selected_suggestion < len(self.suggestions):
            navigate = self.suggestions[self.selected_suggestion].url
            self.text = navigate
        else:
            query = self.text.strip()
            if query:
                navigate = normalize_input(query)
        self.clear_suggestions()
        return navigate

    def choose(self, index: int) -> str:
        """Pick the suggestion at ``index`` and return its URL."""
        if not 0 <= index < len(self.suggestions):
            raise IndexError(f"no suggestion at index {index}")
        url = self.suggestions[index].url
        self.text = url
        self.clear_suggestions()
        return url

    def dismiss(self) -> None:
        """Escape: hide suggestions and drop focus."""
        self.clear_suggestions()
        self.focused = False