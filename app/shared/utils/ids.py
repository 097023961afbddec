"""Primary key generation.

Every table (tenants included) keys rows on a CUID2 string, so the value a
client sends in the tenant header has the same shape as any other row id.
"""

from cuid2 import Cuid

ID_LENGTH = 24

_cuid = Cuid(length=ID_LENGTH)


def generate_cuid() -> str:
    """Return a new lowercase alphanumeric row id of ID_LENGTH characters."""
    return _cuid.generate()
