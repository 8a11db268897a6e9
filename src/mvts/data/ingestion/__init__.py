"""Text import/export for multivariate series."""

from .tabular import (
    UNDATED_ORIGIN,
    from_text,
    read_series_list,
    read_table,
    to_text,
    write_table,
)

__all__ = [
    "UNDATED_ORIGIN",
    "from_text",
    "read_series_list",
    "read_table",
    "to_text",
    "write_table",
]
