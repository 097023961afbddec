"""Shape check for tenant ids taken from headers.

The value is interpolated into `SET LOCAL app.current_tenant_id` on
PostgreSQL, so anything outside [A-Za-z0-9_-] is refused before it reaches
the database.
"""

import re

TENANT_ID_MAX_LENGTH = 64

_SAFE_TOKEN = re.compile(rf"[A-Za-z0-9_-]{{1,{TENANT_ID_MAX_LENGTH}}}")


def is_safe_token(value: str | None) -> bool:
    return value is not None and _SAFE_TOKEN.fullmatch(value) is not None


def is_valid_tenant_id_format(value: str | None) -> bool:
    return is_safe_token(value)
