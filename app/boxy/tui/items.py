"""Item list construction and maintenance.

Builds the primary set from bookmarks and installed packages, merges
bookmarked search results back into it, and resolves which items are
visible for the current view.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from boxy.models.package import PackageFact, PackageItem
from boxy.models.state import AppState


@dataclass(frozen=True, slots=True)
class Section:
    """A labeled run of items in the visible list.

    Attributes:
        label: Section header text.
        items: Items of the section, in display order.
    """

    label: str
    items: list[PackageItem]


def sort_items(items: list[PackageItem]) -> list[PackageItem]:
    """Sort items by name using plain codepoint ordering."""
    return sorted(items, key=lambda item: item.name)


def dedupe_items(items: Iterable[PackageItem]) -> list[PackageItem]:
    """Drop items whose name was already seen, keeping the first."""
    seen: set[str] = set()
    result: list[PackageItem] = []
    for item in items:
        if item.name not in seen:
            seen.add(item.name)
            result.append(item)
    return result


def build_primary_set(
    bookmark_names: Iterable[str],
    installed: Iterable[PackageFact],
    manual_names: Iterable[str] = (),
) -> list[PackageItem]:
    """Build the primary item set.

    Every bookmarked name becomes a bookmarked item whose installed flag
    comes from the installed listing. Installed packages not covered by a
    bookmark are added unbookmarked, as are manually installed names the
    installed listing did not report.

    Args:
        bookmark_names: Bookmarked package names.
        installed: Installed packages reported by the package manager.
        manual_names: Names of manually installed packages.

    Returns:
        Items unique by name, sorted by name.
    """
    by_name: dict[str, PackageFact] = {}
    for fact in installed:
        by_name.setdefault(fact.name, fact)

    items: list[PackageItem] = []
    covered: set[str] = set()

    for name in bookmark_names:
        if name in covered:
            continue
        fact = by_name.get(name) or PackageFact(name=name, installed=False)
        items.append(PackageItem(fact=fact, bookmarked=True))
        covered.add(name)

    for name, fact in by_name.items():
        if name not in covered:
            items.append(PackageItem(fact=fact, bookmarked=False))
            covered.add(name)

    for name in manual_names:
        if name and name not in covered:
            items.append(PackageItem(fact=PackageFact(name=name, installed=True)))
            covered.add(name)

    return sort_items(items)


def merge_filtered_into_primary(
    primary: list[PackageItem],
    filtered: list[PackageItem],
) -> list[PackageItem]:
    """Add bookmarked search results missing from the primary set.

    Args:
        primary: Current primary set.
        filtered: Search results.

    Returns:
        New primary set, unique by name and sorted.
    """
    existing = {item.name for item in primary}
    merged = list(primary)
    for item in filtered:
        if item.bookmarked and item.name not in existing:
            merged.append(item)
            existing.add(item.name)
    return sort_items(merged)


def find_item(items: list[PackageItem] | None, name: str) -> PackageItem | None:
    """Return the item named ``name``, or None."""
    for item in items or ():
        if item.name == name:
            return item
    return None


def patch_installed(items: list[PackageItem] | None, name: str, installed: bool) -> bool:
    """Set the installed flag of the item named ``name``.

    Returns:
        True if an item was patched.
    """
    item = find_item(items, name)
    if item is None:
        return False
    item.fact = item.fact.with_installed(installed)
    return True


def patch_bookmarked(items: list[PackageItem] | None, name: str, bookmarked: bool) -> bool:
    """Set the bookmarked flag of the item named ``name``.

    Returns:
        True if an item was patched.
    """
    item = find_item(items, name)
    if item is None:
        return False
    item.bookmarked = bookmarked
    return True


def replace_fact(items: list[PackageItem] | None, fact: PackageFact) -> bool:
    """Replace the fact of the item with the same name.

    Returns:
        True if an item was updated.
    """
    item = find_item(items, fact.name)
    if item is None:
        return False
    item.fact = fact
    return True


def visible_sections(state: AppState) -> list[Section]:
    """Resolve the labeled sections of the currently visible set.

    Search results take precedence over the primary set. Without show-all,
    only bookmarked or manually installed items are shown. The sectioned
    layout splits the primary view into bookmarked and installed sections.
    """
    if state.filtered is not None:
        return [Section("SEARCH RESULTS", state.filtered)]

    if state.show_all:
        shown = state.items
    else:
        shown = [
            item for item in state.items if item.bookmarked or item.name in state.manual_names
        ]

    if state.layout == "sectioned":
        return [
            Section("BOOKMARKED", [item for item in shown if item.bookmarked]),
            Section("INSTALLED", [item for item in shown if not item.bookmarked]),
        ]

    label = "PACKAGES (all)" if state.show_all else "PACKAGES (manual)"
    return [Section(label, shown)]


def visible_items(state: AppState) -> list[PackageItem]:
    """Return the visible set as one list in display order."""
    return [item for section in visible_sections(state) for item in section.items]


def selected_item(state: AppState) -> PackageItem | None:
    """Return the item under the cursor, or None if the visible set is empty."""
    items = visible_items(state)
    if 0 <= state.cursor < len(items):
        return items[state.cursor]
    return None
