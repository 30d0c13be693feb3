"""Machine identification sent to servers as the hardware id."""

from __future__ import annotations

import sys
from pathlib import Path

_FALLBACK_HDID = "gxsps32sa9fnwic92mfbs2"

_MACHINE_ID_FILES = (
    "/etc/machine-id",
    "/var/lib/dbus/machine-id",
    "/var/db/dbus/machine-id",
    "/etc/hostid",
)


def _read_machine_id() -> str:
    for candidate in _MACHINE_ID_FILES:
        try:
            text = Path(candidate).read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        text = text.strip()
        if text:
            return text
    return ""


def _windows_machine_guid() -> str:
    import winreg

    try:
        with winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE,
            r"SOFTWARE\Microsoft\Cryptography",
            0,
            winreg.KEY_READ | winreg.KEY_WOW64_64KEY,
        ) as key:
            value, _ = winreg.QueryValueEx(key, "MachineGuid")
    except OSError:
        return ""
    return str(value).strip()


def get_hdid() -> str:
    """Return a stable identifier of this machine, or a fixed fallback."""
    if sys.platform == "win32":
        machine_id = _windows_machine_guid()
    else:
        machine_id = _read_machine_id()
    return machine_id or _FALLBACK_HDID