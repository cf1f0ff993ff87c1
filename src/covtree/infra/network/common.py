from __future__ import annotations

from covtree.domain.constants import CURRENT_CONFIG_VERSION

USER_AGENT = f"CovTree-Client/{CURRENT_CONFIG_VERSION}"
DEFAULT_TIMEOUT = 10
ACCEPT_JSON = "application/json"


def default_headers() -> dict:
    """Headers sent with every outbound request."""
    return {"User-Agent": USER_AGENT, "Accept": ACCEPT_JSON}
