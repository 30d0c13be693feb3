"""The server browser shown before joining a game server."""

from __future__ import annotations

import argparse
import html
import logging
import re
import sys
from enum import IntEnum
from typing import Iterable, Optional, Sequence

from .network import DocumentType, MasterServerClient, NetworkManager
from .options import Options, ServerInfo
from .paths import get_base_path

log = logging.getLogger(__name__)

CLIENT_VERSION = (2, 10, 1)
VERSION_STRING = ".".join(str(part) for part in CLIENT_VERSION)

OFFLINE_TEXT = "Offline"
CONNECTING_TEXT = "Connecting..."
JOINING_TEXT = "Joining Server..."
MOTD_FALLBACK = "Couldn't get the message of the day."

_LINK = re.compile(r"\b(https?://\S+\.\S+)\b")


class LobbyTab(IntEnum):
    """The pages of the lobby's server browser."""

    SERVER = 0
    FAVORITES = 1
    DEMOS = 2


_TAB_BUTTONS = {
    LobbyTab.SERVER: frozenset({"add_to_favorite", "direct_connect"}),
    LobbyTab.FAVORITES: frozenset(
        {"remove_from_favorites", "add_server", "edit_favorite"}
    ),
    LobbyTab.DEMOS: frozenset(),
}


def format_server_description(description: str) -> str:
    """Turn a plain server description into HTML with line breaks and links."""
    escaped = html.escape(description, quote=False).replace('"', "&quot;")
    escaped = escaped.replace("\n", "<br>")
    return _LINK.sub(r"<a href='\1'>\1</a>", escaped)


def player_count_text(players_online, max_players) -> str:
    """Return the label shown for a server's player count."""
    return f"Online: {players_online}/{max_players}"


def search_servers(servers: Iterable[ServerInfo], text: str) -> list[int]:
    """Return the indices of servers whose name contains ``text``, ignoring case."""
    servers = list(servers)
    if not text:
        return list(range(len(servers)))
    needle = text.casefold()
    return [index for index, server in enumerate(servers) if needle in server.name.casefold()]


class Lobby:
    """State of the server browser: listed servers, selection and status."""

    def __init__(
        self,
        options: Options,
        network: NetworkManager,
        master: Optional[MasterServerClient] = None,
    ):
        self.options = options
        self.network = network
        self.master = master
        self.servers: list[ServerInfo] = []
        self.tab = LobbyTab.SERVER
        self.motd = ""
        self.version_label = f"Version: {VERSION_STRING}"
        self.version_tooltip = ""
        self.reset_selection()

    @property
    def favorites(self) -> list[ServerInfo]:
        return self.options.favorites()

    @property
    def visible_buttons(self) -> frozenset[str]:
        return _TAB_BUTTONS[self.tab]

    def reset_selection(self) -> None:
        """Forget the selected server and return the panel to its idle state."""
        self.last_index: Optional[int] = None
        self.status = OFFLINE_TEXT
        self.description = ""
        self.favorite_buttons_enabled = False
        self.connect_enabled = False

    def change_tab(self, tab) -> frozenset[str]:
        """Switch to another page; return the names of the buttons it shows."""
        self.tab = LobbyTab(tab)
        self.reset_selection()
        return self.visible_buttons

    def _listed(self) -> list[ServerInfo]:
        if self.tab is LobbyTab.FAVORITES:
            return self.favorites
        if self.tab is LobbyTab.SERVER:
            return self.servers
        return []

    def selected_server(self) -> Optional[int]:
        """Return the index of the selected server on this page, if any."""
        if self.tab is LobbyTab.DEMOS:
            return None
        return self.last_index

    def select(self, index) -> Optional[ServerInfo]:
        """Select a server on the current page and connect to it."""
        if index == self.last_index:
            return None
        self.last_index = index
        if index < 0:
            return None
        if self.tab is LobbyTab.FAVORITES:
            self.favorite_buttons_enabled = True
        listed = self._listed()
        if index >= len(listed):
            return None
        server = listed[index]
        self.description = format_server_description(server.desc)
        self.status = CONNECTING_TEXT
        self.connect_enabled = False
        self.network.connect_to_server(server)
        self.connect_enabled = True
        return server

    def join(self) -> None:
        """Ask the connected server to let this client in."""
        self.status = JOINING_TEXT
        self.network.join_to_server()

    def add_to_favorites(self) -> Optional[ServerInfo]:
        """Add the selected public server to the favourites."""
        selection = self.selected_server()
        if selection is None or selection < 0 or selection >= len(self.servers):
            return None
        server = self.servers[selection]
        self.options.add_favorite(server)
        return server

    def remove_from_favorites(self) -> bool:
        """Remove the selected favourite; return whether one was removed."""
        selection = self.selected_server()
        if selection is None or selection < 0:
            return False
        self.options.remove_favorite(selection)
        return True

    def refresh(self) -> list[ServerInfo]:
        """Fetch the server list and the message of the day again."""
        if self.master is None:
            self.motd = MOTD_FALLBACK
            return self.servers
        try:
            self.servers = self.master.get_server_list()
        except (ValueError, OSError) as exc:
            log.error("Could not get the server list: %s", exc)
        self.motd = self.master.request_document(DocumentType.MOTD) or MOTD_FALLBACK
        return self.servers

    def version_notice(self, remote_version) -> Optional[str]:
        """Flag a newer published version; return the notice or None."""
        if not remote_version or remote_version == VERSION_STRING:
            return None
        self.version_label = f"Version: {VERSION_STRING} (!)"
        self.version_tooltip = f"New version available: {remote_version}"
        return self.version_tooltip


def _strip_tags(text: str) -> str:
    return html.unescape(re.sub(r"<[^>]*>", "", text.replace("<br>", "\n")))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """List the public servers and the message of the day."""
    parser = argparse.ArgumentParser(prog="courtclient")
    parser.add_argument("--base", default=None, help="content directory")
    parser.add_argument("--master", default="", help="master server address")
    args = parser.parse_args(argv)

    options = Options(args.base if args.base is not None else get_base_path())
    try:
        master = MasterServerClient(options, args.master)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    lobby = Lobby(options, NetworkManager(lambda packet: None), master)
    master.send_heartbeat()
    servers = lobby.refresh()
    notice = lobby.version_notice(master.request_document(DocumentType.CLIENT_VERSION))

    print(lobby.version_label)
    if notice:
        print(notice)
    for index, server in enumerate(servers):
        print(f"{index}: {server.name}")
    print()
    print(_strip_tags(lobby.motd))
    return 0


if __name__ == "__main__":
    sys.exit(main())