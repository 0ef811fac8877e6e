"""
All-pages list view state.

Models the header of the "All pages" list: how pages are grouped, which
properties each row displays, the active filters and whether the "new page"
button is shown. Also provides the filtering and grouping applied to page
metadata before it is listed.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from affine_cloud.core.logging_config import get_logger

logger = get_logger(__name__)


class PageGroupBy(str, Enum):
    CREATE_DATE = "createDate"
    UPDATED_DATE = "updatedDate"
    TAG = "tag"
    FAVOURITES = "favourites"
    NONE = "none"


GROUP_LABELS: Dict[PageGroupBy, str] = {
    PageGroupBy.CREATE_DATE: "Created",
    PageGroupBy.UPDATED_DATE: "Updated",
    PageGroupBy.TAG: "Group By Tag",
    PageGroupBy.FAVOURITES: "Group By Favourites",
    PageGroupBy.NONE: "No Grouping",
}


def group_options() -> List[Tuple[PageGroupBy, str]]:
    """``(value, label)`` pairs in menu order."""
    return list(GROUP_LABELS.items())


class PageDisplayProperties(BaseModel):
    """Row properties shown in the list."""

    body_notes: bool = True
    tags: bool = True
    create_date: bool = True
    updated_date: bool = True


PROPERTY_LABELS: Dict[str, str] = {
    "body_notes": "Body notes",
    "tags": "Tags",
    "create_date": "Created",
    "updated_date": "Updated",
}


class PageMeta(BaseModel):
    """Metadata of a page as listed."""

    id: str
    title: str = ""
    create_date: datetime
    updated_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    favorite: bool = False

    @property
    def last_updated(self) -> datetime:
        """Updated date, falling back to the creation date for untouched pages."""
        return self.updated_date or self.create_date


class PageGroup(BaseModel):
    id: str
    label: str
    items: List[PageMeta]


# ---------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------

class Filter(BaseModel):
    """``left <func> args``, e.g. ``Tags contains one ["work"]``."""

    left: str
    func: str
    args: List[Any] = Field(default_factory=list)


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def _tag_set(args: Sequence[Any]) -> set:
    values = args[0] if args and isinstance(args[0], (list, tuple, set)) else args
    return set(values)


_FIELDS: Dict[str, Callable[[PageMeta], Any]] = {
    "Created": lambda page: page.create_date,
    "Updated": lambda page: page.last_updated,
    "Tags": lambda page: page.tags,
    "Is Favourited": lambda page: page.favorite,
}

_FUNCS: Dict[str, Callable[[Any, Sequence[Any]], bool]] = {
    "is": lambda value, args: bool(value) == bool(args[0]),
    "after": lambda value, args: _as_date(value) > _as_date(args[0]),
    "before": lambda value, args: _as_date(value) < _as_date(args[0]),
    "contains all": lambda value, args: _tag_set(args) <= set(value),
    "contains one": lambda value, args: bool(_tag_set(args) & set(value)),
    "does not contains all": lambda value, args: not _tag_set(args) <= set(value),
}


def match_filter(page: PageMeta, page_filter: Filter) -> bool:
    """
    Evaluate one filter against a page.

    Raises:
        ValueError: for unknown fields or functions, or missing arguments
    """
    field = _FIELDS.get(page_filter.left)
    func = _FUNCS.get(page_filter.func)
    if field is None:
        raise ValueError(f"Unknown filter field: {page_filter.left}")
    if func is None:
        raise ValueError(f"Unknown filter function: {page_filter.func}")
    if not page_filter.args:
        raise ValueError(f"Filter {page_filter.left} {page_filter.func} needs an argument")
    return func(field(page), page_filter.args)


def filter_pages(pages: Sequence[PageMeta], filters: Sequence[Filter]) -> List[PageMeta]:
    """Pages matching every filter."""
    return [page for page in pages if all(match_filter(page, f) for f in filters)]


# ---------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------


def date_bucket(value: datetime, today: date) -> Tuple[str, str]:
    """``(id, label)`` of the date group ``value`` falls into."""
    days = (today - value.date()).days
    if days <= 0:
        return "today", "Today"
    if days == 1:
        return "yesterday", "Yesterday"
    if days <= 7:
        return "last7Days", "Last 7 Days"
    if days <= 30:
        return "last30Days", "Last 30 Days"
    if value.year == today.year:
        return "currentYear", "This Year"
    return str(value.year), str(value.year)


def _group_by_date(pages: Sequence[PageMeta], key: Callable[[PageMeta], datetime], today: date) -> List[PageGroup]:
    groups: Dict[str, PageGroup] = {}
    for page in sorted(pages, key=key, reverse=True):
        group_id, label = date_bucket(key(page), today)
        if group_id not in groups:
            groups[group_id] = PageGroup(id=group_id, label=label, items=[])
        groups[group_id].items.append(page)
    return list(groups.values())


def _group_by_tag(pages: Sequence[PageMeta]) -> List[PageGroup]:
    tagged: Dict[str, List[PageMeta]] = {}
    untagged: List[PageMeta] = []
    for page in pages:
        if not page.tags:
            untagged.append(page)
        for tag in dict.fromkeys(page.tags):
            tagged.setdefault(tag, []).append(page)
    groups = [PageGroup(id=tag, label=tag, items=items) for tag, items in sorted(tagged.items())]
    if untagged:
        groups.append(PageGroup(id="no-tags", label="No Tags", items=untagged))
    return groups


def _group_by_favourites(pages: Sequence[PageMeta]) -> List[PageGroup]:
    favourited = [page for page in pages if page.favorite]
    others = [page for page in pages if not page.favorite]
    groups = []
    if favourited:
        groups.append(PageGroup(id="favourited", label="Favourited", items=favourited))
    if others:
        groups.append(PageGroup(id="notFavourited", label="Not Favourited", items=others))
    return groups


def group_pages(
    pages: Sequence[PageMeta], group_by: Union[PageGroupBy, str], today: Optional[date] = None
) -> List[PageGroup]:
    """
    Split pages into labelled groups.

    Date groups are ordered from the most recent and hold their pages newest
    first. Empty groups are left out.

    Args:
        pages: Pages to group
        group_by: Grouping mode
        today: Reference day of the date buckets, defaults to the current day
    """
    group_by = PageGroupBy(group_by)
    today = today or date.today()
    if group_by == PageGroupBy.CREATE_DATE:
        return _group_by_date(pages, lambda page: page.create_date, today)
    if group_by == PageGroupBy.UPDATED_DATE:
        return _group_by_date(pages, lambda page: page.last_updated, today)
    if group_by == PageGroupBy.TAG:
        return _group_by_tag(pages)
    if group_by == PageGroupBy.FAVOURITES:
        return _group_by_favourites(pages)
    return [PageGroup(id="all", label="All", items=list(pages))] if pages else []


# ---------------------------------------------------------------------
# View state
# ---------------------------------------------------------------------

StateListener = Callable[["AllPageViewState"], None]


class AllPageViewState:
    """State behind the all-pages header menu."""

    def __init__(
        self,
        group_by: Union[PageGroupBy, str] = PageGroupBy.UPDATED_DATE,
        properties: Optional[PageDisplayProperties] = None,
        filters: Optional[Sequence[Filter]] = None,
        show_create_new: bool = True,
    ) -> None:
        self.group_by = PageGroupBy(group_by)
        self.properties = properties or PageDisplayProperties()
        self.filters: List[Filter] = list(filters or [])
        self.show_create_new = show_create_new
        self._listeners: List[StateListener] = []

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def select_group(self, value: Union[PageGroupBy, str]) -> None:
        self.group_by = PageGroupBy(value)
        logger.debug(f"Page list grouped by {self.group_by.value}")
        self._notify()

    @property
    def current_group_label(self) -> str:
        return GROUP_LABELS[self.group_by]

    def group_options(self) -> List[Tuple[PageGroupBy, str, bool]]:
        """``(value, label, active)`` for every grouping."""
        return [(value, label, value == self.group_by) for value, label in group_options()]

    def property_options(self) -> List[Tuple[str, str, bool]]:
        """``(key, label, active)`` for every display property."""
        return [(key, label, getattr(self.properties, key)) for key, label in PROPERTY_LABELS.items()]

    def toggle_property(self, key: str) -> bool:
        """
        Flip a display property.

        Returns:
            The new value

        Raises:
            KeyError: for unknown properties
        """
        if key not in PROPERTY_LABELS:
            raise KeyError(key)
        value = not getattr(self.properties, key)
        self.properties = self.properties.model_copy(update={key: value})
        self._notify()
        return value

    def set_filters(self, filters: Sequence[Filter]) -> None:
        self.filters = list(filters)
        self._notify()

    def set_show_create_new(self, show: bool) -> None:
        self.show_create_new = show
        self._notify()

    def apply(self, pages: Sequence[PageMeta], today: Optional[date] = None) -> List[PageGroup]:
        """Filter then group ``pages`` according to the current state."""
        return group_pages(filter_pages(pages, self.filters), self.group_by, today)
