"""Persistent client settings and the favourite server list."""

from __future__ import annotations

import configparser
import locale
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

log = logging.getLogger(__name__)

GENERAL = "General"
_INVALID = "@Invalid()"
_NO_DEFAULTS = "__no_defaults__"


class ConnectionType(Enum):
    """Transport used to reach a server."""

    TCP = "tcp"
    WEBSOCKETS = "ws"

    @classmethod
    def from_protocol(cls, protocol: str) -> "ConnectionType":
        return cls.WEBSOCKETS if protocol == cls.WEBSOCKETS.value else cls.TCP


@dataclass
class ServerInfo:
    """A game server as listed in the lobby."""

    ip: str
    port: int
    name: str = ""
    desc: str = ""
    socket_type: ConnectionType = ConnectionType.TCP


_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


def _encode_text(text: str) -> str:
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in text)
    if "," in text or text != text.strip() or text.startswith("@"):
        return f'"{escaped}"'
    return escaped


def _encode(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return _encode_text(value)
    items = [str(item) for item in value]
    if not items:
        return _INVALID
    return ", ".join(_encode_text(item) for item in items)


def _finish(chars: list[tuple[str, bool]]) -> str:
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(ch for ch, _ in chars[start:end])


def _split(raw: str) -> list[str]:
    if raw == _INVALID:
        return []
    tokens: list[str] = []
    current: list[tuple[str, bool]] = []
    in_quotes = False
    chars = iter(raw)
    for ch in chars:
        if ch == "\\":
            following = next(chars, "")
            current.append((_UNESCAPES.get(following, following), True))
        elif ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            tokens.append(_finish(current))
            current = []
        else:
            current.append((ch, in_quotes))
    tokens.append(_finish(current))
    return tokens


def _decode(raw: str, default):
    tokens = _split(raw)
    if isinstance(default, (list, tuple)):
        return tokens
    if len(tokens) == 1:
        text = tokens[0]
    elif tokens:
        text = ", ".join(tokens)
    else:
        text = ""
    if isinstance(default, bool):
        return text.strip().lower() not in ("", "0", "false")
    if isinstance(default, int):
        try:
            return int(text.strip())
        except ValueError:
            return 0
    return text


class _IniFile:
    """A small INI store with groups, written back on save()."""

    def __init__(self, path: Path):
        self.path = path
        self._groups: dict[str, dict[str, str]] = {}
        if path.is_file():
            parser = self._parser()
            parser.read(path, encoding="utf-8")
            for section in parser.sections():
                self._groups[section] = dict(parser.items(section, raw=True))

    @staticmethod
    def _parser() -> configparser.ConfigParser:
        parser = configparser.ConfigParser(
            interpolation=None, strict=False, default_section=_NO_DEFAULTS
        )
        parser.optionxform = str
        return parser

    def get(self, group: str, key: str) -> str | None:
        return self._groups.get(group, {}).get(key)

    def entries(self, group: str) -> dict[str, str]:
        return dict(self._groups.get(group, {}))

    def contains(self, group: str, key: str) -> bool:
        return key in self._groups.get(group, {})

    def set(self, group: str, key: str, raw: str) -> None:
        self._groups.setdefault(group, {})[key] = raw

    def remove(self, group: str, key: str) -> None:
        entries = self._groups.get(group)
        if entries is not None:
            entries.pop(key, None)

    def groups(self) -> list[str]:
        return [name for name in self._groups if name != GENERAL]

    def clear(self) -> None:
        self._groups.clear()

    def save(self) -> None:
        parser = self._parser()
        for name, entries in self._groups.items():
            parser[name] = entries
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as handle:
            parser.write(handle, space_around_delimiters=False)


def _system_language() -> str:
    try:
        name = locale.getlocale()[0]
    except ValueError:
        name = None
    return name or "C"


_DEFAULTS: dict[str, object] = {
    "theme": "default",
    "blip_rate": 2,
    "default_music": 50,
    "default_sfx": 50,
    "default_blip": 50,
    "suppress_audio": 50,
    "log_maximum": 200,
    "stay_time": 200,
    "text_crawl": 40,
    "chat_ratelimit": 300,
    "log_goes_downwards": True,
    "log_newline": False,
    "log_margin": 0,
    "log_timestamp": False,
    "log_timestamp_format": "h:mm:ss AP",
    "log_ic_actions": True,
    "show_custom_shownames": True,
    "default_username": "",
    "default_showname": "",
    "default_audio_device": "default",
    "blank_blip": False,
    "looping_sfx": True,
    "objection_stop_music": False,
    "streaming_enabled": True,
    "instant_objection": True,
    "desync_logs": False,
    "discord": True,
    "shake": True,
    "effects": True,
    "framenetwork": True,
    "colorlog": True,
    "stickysounds": True,
    "stickyeffects": True,
    "stickypres": True,
    "customchat": True,
    "sticker": True,
    "continuous_playback": True,
    "category_stop": True,
    "automatic_logging_enabled": True,
    "demo_logging_enabled": True,
    "subtheme": "server",
    "animated_theme": True,
    "default_scaling": "fast",
    "mount_paths": (),
    "player_count_optout": False,
    "sfx_on_idle": False,
    "evidence_double_click": True,
    "master": "",
    "language": "",
    "callwords": (),
}

_CASING_KEYS = (
    "casing_enabled",
    "casing_defence_enabled",
    "casing_prosecution_enabled",
    "casing_judge_enabled",
    "casing_juror_enabled",
    "casing_steno_enabled",
    "casing_cm_enabled",
    "casing_can_host_cases",
)


class Options:
    """Settings kept in config.ini and favourites in favorite_servers.ini."""

    def __init__(self, base_path):
        self.base_path = Path(base_path)
        self.config = _IniFile(self.base_path / "config.ini")
        self.favorite = _IniFile(self.base_path / "favorite_servers.ini")
        self.server_sub_theme = ""
        self.migrate()

    # -- general settings -------------------------------------------------

    @staticmethod
    def _default(key: str):
        if key not in _DEFAULTS:
            raise KeyError(f"unknown setting: {key}")
        if key == "language":
            return _system_language()
        return _DEFAULTS[key]

    def get(self, key: str):
        """Return the value of setting ``key``, or its default."""
        default = self._default(key)
        raw = self.config.get(GENERAL, key)
        if raw is None:
            return list(default) if isinstance(default, tuple) else default
        return _decode(raw, default)

    def set(self, key: str, value) -> None:
        """Store ``value`` for setting ``key`` and write the file."""
        self._default(key)
        self.config.set(GENERAL, key, _encode(value))
        self.config.save()

    def clear_config(self) -> None:
        """Forget every stored setting."""
        self.config.clear()
        self.config.save()

    def migrate(self) -> None:
        """Bring settings written by older releases up to date."""
        changed = False
        if self.config.contains(GENERAL, "show_custom_shownames"):
            self.config.remove(GENERAL, "show_custom_shownames")
            changed = True
        if (self.base_path / "callwords.ini").exists():
            self._migrate_callwords()
        if self.config.contains(GENERAL, "ooc_name"):
            if not self.get("default_username"):
                self.config.set(
                    GENERAL, "default_username", self.config.get(GENERAL, "ooc_name")
                )
            self.config.remove(GENERAL, "ooc_name")
            changed = True
        if self.config.contains(GENERAL, "casing_enabled"):
            for key in _CASING_KEYS:
                self.config.remove(GENERAL, key)
            changed = True
        if changed:
            self.config.save()

    def _migrate_callwords(self) -> None:
        path = self.base_path / "callwords.ini"
        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            log.warning("Unable to migrate callwords : File not open.")
            return
        path.unlink()
        self.set_callwords(text.splitlines())

    def sub_theme(self) -> str:
        """Return the subtheme in effect, preferring the server's if asked to."""
        chosen = self.get("subtheme")
        if chosen == "server" and self.server_sub_theme:
            return self.server_sub_theme
        return chosen

    def callwords(self) -> list[str]:
        words = self.get("callwords")
        if len(words) == 1 and not words[0]:
            return []
        return words

    def set_callwords(self, value) -> None:
        self.set("callwords", list(value))

    def mount_paths(self) -> list[str]:
        return self.get("mount_paths")

    # -- favourite servers ------------------------------------------------

    def _group_value(self, entries: dict[str, str], key: str, default):
        raw = entries.get(key)
        return default if raw is None else _decode(raw, default)

    def favorites(self) -> list[ServerInfo]:
        """Return the favourite servers ordered by their index."""
        groups = [g for g in self.favorite.groups() if g.isascii() and g.isdigit()]
        groups.sort(key=int)
        servers = []
        for group in groups:
            entries = self.favorite.entries(group)
            servers.append(
                ServerInfo(
                    ip=self._group_value(entries, "address", "127.0.0.1"),
                    port=self._group_value(entries, "port", 27016),
                    name=self._group_value(entries, "name", "Missing Name"),
                    desc=self._group_value(entries, "desc", "No description"),
                    socket_type=ConnectionType.from_protocol(
                        self._group_value(entries, "protocol", "tcp")
                    ),
                )
            )
        return servers

    def _write_server(self, index: int, server: ServerInfo) -> None:
        group = str(index)
        self.favorite.set(group, "name", _encode(server.name))
        self.favorite.set(group, "address", _encode(server.ip))
        self.favorite.set(group, "port", _encode(int(server.port)))
        self.favorite.set(group, "desc", _encode(server.desc))
        protocol = "tcp" if server.socket_type is ConnectionType.TCP else "ws"
        self.favorite.set(group, "protocol", protocol)

    def set_favorites(self, servers) -> None:
        """Replace the whole favourite list."""
        self.favorite.clear()
        for index, server in enumerate(servers):
            self._write_server(index, server)
        self.favorite.save()

    def add_favorite(self, server: ServerInfo) -> None:
        self._write_server(len(self.favorites()), server)
        self.favorite.save()

    def remove_favorite(self, index: int) -> None:
        servers = self.favorites()
        if not 0 <= index < len(servers):
            raise IndexError(f"no favourite server at index {index}")
        del servers[index]
        self.set_favorites(servers)

    def update_favorite(self, server: ServerInfo, index: int) -> None:
        self._write_server(index, server)
        self.favorite.save()

    # -- theme assets -----------------------------------------------------

    def get_ui_asset(self, asset_name: str, resource_root) -> Path:
        """Locate a UI definition in the theme, falling back to the bundled one."""
        root = Path(resource_root)
        theme = self.get("theme")
        theme_dir = root / "base" / "themes" / theme
        candidates = [theme_dir / asset_name]
        sub = self.sub_theme()
        if sub != "server":
            candidates.insert(0, theme_dir / sub / asset_name)
        for candidate in candidates:
            if candidate.exists():
                return candidate
        log.warning(
            "Unable to locate ui-asset %s in theme %s Defaulting to embedded asset.",
            asset_name,
            theme,
        )
        return root / "resource" / "ui" / asset_name