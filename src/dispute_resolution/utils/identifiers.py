import random
import string
import time

_BASE36 = string.digits + string.ascii_uppercase


def generate_case_id() -> str:
    """
    CASE-<epoch millis>-<6 random base36 chars, uppercased>
    """
    timestamp = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=6))
    return f"CASE-{timestamp}-{suffix}"


def generate_email_id() -> str:
    return f"EMAIL-{int(time.time() * 1000)}"
