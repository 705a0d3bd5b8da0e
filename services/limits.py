from __future__ import annotations

import logging

log = logging.getLogger(__name__)


def parse_row_limit(raw, setting_name: str) -> int | None:
    """Interpret a MAX_ROWS_* setting.

    A positive integer is a cap. Unset, empty or ``unlimited`` means no cap.
    Anything else is logged and ignored.
    """
    if raw is None or raw == "":
        log.info("%s not set. Skipping row limit check.", setting_name)
        return None
    text = str(raw).strip()
    if text.lower() == "unlimited":
        return None
    try:
        value = int(text)
    except ValueError:
        value = 0
    if value > 0:
        return value
    log.warning("Invalid %s value: %s. Row limit check skipped.", setting_name, raw)
    return None
