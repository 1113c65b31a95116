# fortrust

The core model of a privacy-focused web browser, with no user interface
attached. It is a library: it has no command to run.

## What it covers

- **Configuration** (`fortrust.config`). `BrowserConfig` holds a
  `PrivacyConfig`, a `PerformanceConfig` and a `UiConfig`, all with their
  defaults. `to_dict()` returns a nested dict. `BrowserConfig.from_dict()`
  rebuilds the config and raises `ValueError` if a section or field is missing,
  has the wrong type, or is out of range.
- **Referrer policies** (`fortrust.referrer`). `compute_referer(request_url,
  top_level_url, policy)` returns the `Referer` value to send under a
  `ReferrerPolicy`, or `None`. `same_origin` and `origin_of` are available too.
  `origin_of` omits default ports and raises `ValueError` for a URL that is not
  absolute.
- **Tabs and memory budget** (`fortrust.tabs`). `TabManager` opens, activates,
  navigates, reorders and closes tabs. When a new tab becomes active, the
  previous one turns warm. The manager suspends background tabs that have gone
  stale, keeps at most `warm_tab_limit` warm tabs, and then suspends or discards
  tabs until `memory_report().total_estimated_mb` fits the budget.
- **Workspaces** (`fortrust.workspaces`). `WorkspaceManager` groups tab ids
  into named, coloured workspaces. Workspace 1 ("Default") cannot be deleted.
  When a workspace is deleted, its tabs move to workspace 1.
- **Images** (`fortrust.images`). `ImageRegistry` gives each distinct image URL
  a stable integer id. It supports `len()` and iterates as `(id, DecodedImage)`
  pairs.
- **Downloads** (`fortrust.download`). `DownloadManager` runs each download on
  a background thread using `requests`, and tracks it as a `DownloadEntry`
  whose `status` holds a `DownloadState`.
  - It can pause, resume and remove downloads. A resume continues with an HTTP
    `Range` request.
  - A connection error or timeout in mid-transfer pauses the download; other
    errors mark it failed with a message.
  - `save_state(settings)` writes unfinished downloads as JSON into any mutable
    mapping, and `load_state(settings)` restores them, all paused.
  - `default_download_dir()` returns the user's Downloads folder.
- **Address bar** (`fortrust.omnibox`). `OmniboxState` builds suggestions from
  history entries while it is focused. It offers keyboard selection through
  `select_next`, `select_previous`, `submit`, `choose` and `dismiss`.
  `normalize_input` turns typed text into a URL or a private search URL.
- **Shield** (`fortrust.shield`). `ShieldState` keeps per-site shield
  overrides and blocking counters, the indicator shown on the shield button
  (`ShieldIndicator`), and the fade of the shield popup.
- **Theme** (`fortrust.theme`). `Theme.dark()` and `Theme.light()` return the
  named colour palettes. `Color` provides `from_hex`, `to_hex`, `lerp` and
  `gamma_multiply`.
- **Clock** (`fortrust.clock`). `clock_components` and `clock_text` format the
  new-tab clock, which is shown at UTC+8.

## Install

```
pip install .
pip install ".[test]"   # with the test tools
```

## Examples

```python
from fortrust.referrer import ReferrerPolicy, compute_referer

compute_referer("https://other.com/x", "https://example.com/", ReferrerPolicy.ORIGIN)
# 'https://example.com'
compute_referer("https://other.com/x", "https://example.com/", ReferrerPolicy.SAME_ORIGIN)
# None
```

```python
from fortrust.config import PerformanceConfig
from fortrust.tabs import TabManager

tabs = TabManager(PerformanceConfig())
for i in range(50):
    tabs.open_tab(f"https://example{i}.com", f"Tab {i}", False)
report = tabs.memory_report()
assert report.active_tabs == 1
assert report.total_estimated_mb <= report.budget_mb
```

```python
from fortrust.workspaces import WorkspaceManager

spaces = WorkspaceManager()
work = spaces.create("Work", "#ff8800")
spaces.add_tab(work, 7)
spaces.delete(work)
spaces.workspace_for_tab(7)   # 1
```

```python
from fortrust.omnibox import OmniboxState, SuggestionItem, SuggestionKind, normalize_input

normalize_input("example.com")   # 'https://example.com'
normalize_input("rust books")    # 'fortrust://search?q=rust%20books'

box = OmniboxState(text="exam", focused=True)
box.update_suggestions([SuggestionItem(SuggestionKind.HISTORY, "Example", "https://example.com")])
box.select_next()
box.submit()                      # 'https://example.com'
```

```python
from fortrust.download import DownloadManager, DownloadState

manager = DownloadManager()
download_id = manager.start_download("https://example.com/file.bin", "file.bin", "/tmp/downloads")
entry = manager.wait(download_id, timeout=60)
print(entry.status.state is DownloadState.COMPLETED, entry.downloaded_bytes)

settings = {}
manager.save_state(settings)      # only unfinished downloads are saved
```

```python
from fortrust.clock import clock_text

clock_text(0)   # ('08:00', '00')
```

## What it does not do

- It has no request inspection engine. There is nothing here that decides
  whether to block tracker or ad hosts, upgrade `http` to `https`, or strip
  tracking query parameters. `PrivacyConfig` only holds the switches for those
  protections.
- It draws nothing. Themes, shield indicators and the clock are data for a
  user interface to use.
- It has no storage of its own. Download state is saved into whatever mapping
  the caller passes in.

## Tests

```
pytest
```