"""Catalog query constants.

Only these columns may drive the ORDER BY of a catalog listing; the sort
key comes straight from the query string, so anything else is replaced by
``DEFAULT_SORT_FIELD``.
"""

SORTABLE_FIELDS: frozenset[str] = frozenset(
    {"id", "name", "sku", "price_cents", "stock_quantity", "created_at"}
)

DEFAULT_SORT_FIELD = "id"

SORT_ASC = "asc"
SORT_DESC = "desc"

# Column limits shared by the model, the DTOs and the API serializers.
NAME_MAX_LENGTH = 255
SKU_MAX_LENGTH = 64
# PostgreSQL integer maximum, applied on every backend.
MAX_INTEGER_VALUE = 2**31 - 1
