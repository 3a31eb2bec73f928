"""
dts Engine Configuration.

Configuration dataclass and environment variable support for the defaults
of the builtin transformation definitions.
"""

import os
from dataclasses import dataclass


# =============================================================================
# Default Values
# =============================================================================

DEFAULT_FLATTEN_PREFIX = "data"
DEFAULT_SORT_ORDER = "asc"
DEFAULT_REPLACE_LIMIT = 0  # 0 = replace all matches


@dataclass(frozen=True)
class EngineConfig:
    """
    Defaults applied to arguments omitted from a pipeline.

    Environment variables:
        DTS_FLATTEN_PREFIX: Default prefix of ``flatten_keys``
        DTS_SORT_ORDER: Default order of ``sort`` (``asc`` or ``desc``)
        DTS_REPLACE_LIMIT: Default limit of ``replace_string``

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    flatten_prefix: str = DEFAULT_FLATTEN_PREFIX
    sort_order: str = DEFAULT_SORT_ORDER
    replace_limit: int = DEFAULT_REPLACE_LIMIT

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Create configuration from environment variables.

        Raises:
            ValueError: If DTS_REPLACE_LIMIT is not a non-negative integer
        """
        limit = int(os.getenv("DTS_REPLACE_LIMIT", str(DEFAULT_REPLACE_LIMIT)))
        if limit < 0:
            raise ValueError(f"DTS_REPLACE_LIMIT must not be negative, got {limit}")
        return cls(
            flatten_prefix=os.getenv("DTS_FLATTEN_PREFIX", DEFAULT_FLATTEN_PREFIX),
            sort_order=os.getenv("DTS_SORT_ORDER", DEFAULT_SORT_ORDER),
            replace_limit=limit,
        )
