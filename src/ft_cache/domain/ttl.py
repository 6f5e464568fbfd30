"""TTL conventions (seconds) per resource class."""

TRANSACTION_LIST_TTL = 300
TRANSACTION_ITEM_TTL = 600
TRANSACTION_SUMMARY_TTL = 900

CATEGORY_TTL = 3600  # rarely mutated
CATEGORY_STATS_TTL = 900

ANALYTICS_TTL = 900

ADMIN_USER_LIST_TTL = 300
ADMIN_USER_DETAIL_TTL = 600
ADMIN_STATS_TTL = 600
ADMIN_TRANSACTION_LIST_TTL = 300
