"""
Certificate number generator
"""

from datetime import datetime


def generate_noc_number(now: datetime = None) -> str:
    """
    Builds a date-stamped certificate number without touching the database.

    Format: NOC-YY-MM-DD-XXXXXX, where XXXXXX are the last six digits of the
    epoch timestamp in milliseconds.

    Example: NOC-25-03-14-482913

    Two calls within the same millisecond return the same number; the unique
    constraint on noc_certificates.noc_number rejects the second insert.
    """
    now = now or datetime.now()
    millis = str(int(now.timestamp() * 1000))[-6:].rjust(6, "0")
    return f"NOC-{now:%y}-{now:%m}-{now:%d}-{millis}"
