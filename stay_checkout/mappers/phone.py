def _digits(phone: str) -> str:
    return "".join(c for c in phone if c.isdigit())


def to_e164(phone: str | None) -> str:
    """Best-effort E.164 conversion for US numbers. Never raises.

    - "+..." keeps its country code, formatting stripped
    - 10 digits -> "+1" prefix
    - 11 digits starting with 1 -> "+" prefix
    - anything else is returned as given (trimmed)
    """
    if not phone:
        return ""
    raw = phone.strip()
    digits = _digits(raw)

    if raw.startswith("+"):
        return f"+{digits}" if digits else raw
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"

    # Unrecognized shape: pass through unchanged
    return raw
