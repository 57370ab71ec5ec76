import re
from unidecode import unidecode


def normalize_name(text):
    """Turn a user supplied field, group or container name into a storage-safe name."""
    text = unidecode(text or "").lower().strip()
    text = re.sub(r"[^a-z0-9_]+", "_", text)
    return text


def humanize_name(name):
    return name.replace("_", " ").strip().title()
