"""
Redirect destination building.

What goes on the outgoing URL:
  1. The click id (settings.click_param, default sb_click) → ALWAYS.
  2. utm_source / utm_medium / utm_campaign → only when the inbound
     /r/:slug request carried them with a value. An empty tag
     (?utm_source=) is treated as absent and not forwarded.

The stored target's query string is kept byte for byte (bare flags,
custom percent-encoding) and the new parameters are appended. A parameter
of the same name already on the target is removed first so ours wins.
A stored target that isn't a well-formed absolute URL is returned untouched.
"""

import re
from urllib.parse import quote, unquote_plus, urlencode, urlparse, urlunparse

UTM_PARAMS = ("utm_source", "utm_medium", "utm_campaign")

_HAS_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def normalize_target(raw: str | None) -> str:
    """Trim and prepend https:// when the operator left the scheme off."""
    target = (raw or "").strip()
    if target and not _HAS_SCHEME.match(target):
        target = "https://" + target
    return target


def is_absolute_url(url: str) -> bool:
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def extract_utm_params(query_params) -> dict:
    """UTM tags present (and non-empty) on the inbound request."""
    return {key: query_params[key] for key in UTM_PARAMS if query_params.get(key)}


def _query_key(pair: str) -> str:
    return unquote_plus(pair.split("=", 1)[0])


def inject_params_to_url(url: str, params: dict) -> str:
    """Append query parameters to a URL, replacing any existing pair with the same key."""
    parsed = urlparse(url)
    kept = [pair for pair in parsed.query.split("&") if pair and _query_key(pair) not in params]
    kept.append(urlencode({key: str(value) for key, value in params.items()}, quote_via=quote))
    return urlunparse(parsed._replace(query="&".join(kept)))


def build_redirect_url(
    target: str,
    click_id: str,
    utm: dict | None = None,
    click_param: str = "sb_click",
) -> str:
    if not is_absolute_url(target):
        return target

    params = {click_param: click_id}
    if utm:
        params.update(utm)
    return inject_params_to_url(target, params)
