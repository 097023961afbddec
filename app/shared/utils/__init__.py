"""Row id and timestamp helpers used by models and repositories."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.ids import ID_LENGTH, generate_cuid

__all__ = ["ID_LENGTH", "ensure_utc", "generate_cuid", "utc_now"]
