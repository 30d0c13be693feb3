"""Client core for courtroom role-playing servers: settings, networking,
emote and evidence logic, and the server lobby."""

__version__ = "2.10.1"

__all__ = [
    "emotes",
    "evidence",
    "hardware",
    "inventory",
    "lobby",
    "network",
    "options",
    "paths",
]