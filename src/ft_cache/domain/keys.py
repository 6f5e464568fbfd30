"""Cache key composition and invalidation patterns.

Key format:      cache:<path>[?<query>]:<principal>
Pattern format:  Redis glob, e.g. cache:*:42 or cache:*/analytics*:*

Keys are plain string concatenation (no hashing), so equal inputs always
produce equal keys across processes and restarts. The principal segment is
always last and principal ids never contain ':', which keeps distinct
(path, query, principal) triples on distinct keys.

``user_id`` query values are stored in canonical UUID form (lowercase,
hyphenated) so every spelling the routers accept for one user lands on the
key that ``subject_pattern`` matches.
"""

import uuid
from urllib.parse import unquote

KEY_PREFIX = "cache"
ANONYMOUS = "anonymous"
ANY_PRINCIPAL = "*"

# Path fragments used to scope invalidation to one resource area.
TRANSACTIONS_FRAGMENT = "/transactions"
ANALYTICS_FRAGMENT = "/analytics"
CATEGORIES_FRAGMENT = "/categories"
CATEGORY_STATS_FRAGMENT = "/categories/stats"
ADMIN_FRAGMENT = "/admin"

SUBJECT_PARAM = "user_id"


def canonical_user_id(value: str) -> str:
    """Return ``value`` as a canonical UUID string, or unchanged if it is not one."""
    try:
        return str(uuid.UUID(unquote(value)))
    except ValueError:
        return value


def normalize_query(query_string: str) -> str:
    """Canonicalize ``user_id`` values; other parameters keep their order and text.

    Example:
        normalize_query("page=2&user_id=1133BE6EA4894A2C8E1F0D3B5C7A9E21")
            -> "page=2&user_id=1133be6e-a489-4a2c-8e1f-0d3b5c7a9e21"
    """
    if not query_string:
        return query_string
    parts = []
    for part in query_string.split("&"):
        name, sep, value = part.partition("=")
        if name == SUBJECT_PARAM and sep:
            value = canonical_user_id(value)
        parts.append(f"{name}{sep}{value}")
    return "&".join(parts)


def compose_key(path: str, query_string: str, principal_id: str | None) -> str:
    """Build the cache key for one (path, query, principal) triple.

    Examples:
        compose_key("/api/v1/categories", "", None)
            -> "cache:/api/v1/categories:anonymous"
        compose_key("/api/v1/transactions", "page=2", "42")
            -> "cache:/api/v1/transactions?page=2:42"
    """
    query_string = normalize_query(query_string)
    target = f"{path}?{query_string}" if query_string else path
    return f"{KEY_PREFIX}:{target}:{principal_id or ANONYMOUS}"


def principal_pattern(principal_id: str) -> str:
    """Every cached path for one principal."""
    return f"{KEY_PREFIX}:*:{principal_id}"


def domain_pattern(fragment: str, principal_id: str = ANY_PRINCIPAL) -> str:
    """Every cached path containing ``fragment``, for one or all principals."""
    return f"{KEY_PREFIX}:*{fragment}*:{principal_id}"


def subject_pattern(user_id: str) -> str:
    """Every cached view requested with ``user_id=<id>`` in its query, any principal.

    Admins read other users' data through ``?user_id=``; those entries are
    keyed on the admin, so the owner's principal pattern does not reach them.
    The trailing class stops ``user_id=7`` from matching ``user_id=70``.
    """
    return f"{KEY_PREFIX}:*[?&]{SUBJECT_PARAM}={canonical_user_id(user_id)}[&:]*"
