"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, control keys, and SGR mouse events. Mouse
tokens carry zero-based screen coordinates: ``MOUSE_<KIND>:<x>:<y>``.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_SPECIAL_BYTES = {
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b" ": "SPACE",
}
_CSI_FINAL = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}
_CSI_TILDE = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "5": "PGUP",
    "6": "PGDN",
    "3": "DELETE",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >> 5 == 0b110:
        return 2
    if lead >> 4 == 0b1110:
        return 3
    if lead >> 3 == 0b11110:
        return 4
    return 1


def _decode_text(fd: int, ch: bytes) -> str:
    data = ch
    for _ in range(_utf8_length(ch[0]) - 1):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data.decode("utf-8", errors="replace")


def _decode_mouse(fd: int) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M/m)
    payload = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload.append(part)
        if len(payload) > 64:
            return "ESC"
    try:
        btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
        btn = int(btn_s)
        x = int(col_s) - 1
        y = int(row_s) - 1
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{x}:{y}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{x}:{y}"
        return "MOUSE"
    if btn & 0b0010_0000:
        return f"MOUSE_MOVE:{x}:{y}"
    if button == 0:
        suffix = "DOWN" if part == b"M" else "UP"
        return f"MOUSE_LEFT_{suffix}:{x}:{y}"
    return "MOUSE"


def _decode_csi(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _CSI_FINAL:
        return _CSI_FINAL[seq]
    if seq == b"<":
        return _decode_mouse(fd)
    if not seq.isdigit():
        return "ESC"
    params = seq
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part == b"~":
            return _CSI_TILDE.get(params.decode("ascii").split(";")[0], "ESC")
        if part.isalpha():
            # Modified arrows such as ESC [ 1 ; 5 A collapse to the plain key.
            return _CSI_FINAL.get(part, "ESC")
        params += part
        if len(params) > 16:
            return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; ``""`` on timeout or EOF."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _SPECIAL_BYTES:
        return _SPECIAL_BYTES[ch]
    if 1 <= ch[0] <= 26:
        return "CTRL_" + chr(ord("A") + ch[0] - 1)

    if ch != b"\x1b":
        return _decode_text(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINAL.get(final, "ESC")
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"
    return _decode_csi(fd)


def parse_mouse_token(key: str) -> tuple[str, int, int] | None:
    """Split ``MOUSE_<KIND>:<x>:<y>`` into ``(kind, x, y)``."""
    if not key.startswith("MOUSE_"):
        return None
    parts = key.split(":")
    if len(parts) != 3:
        return None
    try:
        return parts[0][len("MOUSE_"):], int(parts[1]), int(parts[2])
    except ValueError:
        return None
