"""
AFFiNE Cloud client.

Consumes the server REST API the way the AFFiNE app does.

- fetch: ``RawFetchProvider``, an httpx client raising ``UserFriendlyError``
- servers: ``Server`` with a cached config and the ``ServersService`` registry
- subscription: ``SubscriptionStore`` with a local mutation cache
- share_reader: ``ShareReaderStore`` loading shared docs
- page_list: all-pages header state, filtering and grouping
"""

from .fetch import RawFetchProvider
from .page_list import (
    AllPageViewState,
    Filter,
    PageDisplayProperties,
    PageGroup,
    PageGroupBy,
    PageMeta,
    filter_pages,
    group_pages,
)
from .servers import Server, ServersService
from .share_reader import ShareReaderStore, ShareSnapshot
from .subscription import SubscriptionStore

__all__ = [
    "AllPageViewState",
    "Filter",
    "PageDisplayProperties",
    "PageGroup",
    "PageGroupBy",
    "PageMeta",
    "RawFetchProvider",
    "Server",
    "ServersService",
    "ShareReaderStore",
    "ShareSnapshot",
    "SubscriptionStore",
    "filter_pages",
    "group_pages",
]
