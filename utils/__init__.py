"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc
from utils.birth_date import is_valid_birth_date, birth_date_to_iso
