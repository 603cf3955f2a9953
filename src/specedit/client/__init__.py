"""HTTP side of specedit: the request runner and the connectivity prober.

Both are read-only consumers of the stored document. They hold their own
transient results and never write back into the document.
"""

from specedit.client.prober import ConnectivityProber, check_servers
from specedit.client.runner import (
    RequestResult,
    RequestRunner,
    RequestState,
    construct_full_url,
)

__all__ = [
    "ConnectivityProber",
    "RequestResult",
    "RequestRunner",
    "RequestState",
    "check_servers",
    "construct_full_url",
]
