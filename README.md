# courtclient

The core of a client for courtroom role-playing servers. It keeps your
settings and favourite servers, talks to a master server and to game servers
over TCP or WebSockets, and holds the logic behind the emote button grid, the
evidence locker and the server lobby.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## The `courtclient` command

```
courtclient --master https://master.example.com
```

The command reads settings from a base directory (`--base`, by default a
`base/` directory next to the program), then:

1. sends a "playing" heartbeat to the master server, unless the
   `player_count_optout` setting is on;
2. fetches the public server list and the message of the day;
3. asks for the published client version.

It prints `Version: 2.10.1` (marked with `(!)` and followed by a notice when a
different version is published), one `index: name` line per public server, a
blank line, and the message of the day with its HTML tags removed.

If the `master` setting in `config.ini` holds an `http` or `https` address it
is used instead of `--master`. With no master address at all the command
prints an error and exits with status 2.

## Using it as a library

Settings live in `config.ini`, and favourites in `favorite_servers.ini`, under
a base directory. Unknown setting names raise `KeyError`.

```python
from courtclient.options import Options, ServerInfo, ConnectionType

options = Options("/path/to/base/")
options.set("theme", "default")
options.add_favorite(ServerInfo(name="Local", ip="127.0.0.1", port=27016,
                                socket_type=ConnectionType.TCP))
print([server.name for server in options.favorites()])
```

Game-server traffic is a stream of `%`-terminated packets whose fields are
separated by `#`. `PacketAssembler` joins partial reads into whole packets:

```python
from courtclient.network import PacketAssembler, Packet

assembler = PacketAssembler()
assembler.feed("CT#name#hel")             # []: the packet is not complete yet
packets = assembler.feed("lo#%ID#1#%")    # [Packet("CT", ["name", "hello"]), Packet("ID", ["1"])]
Packet("askchaa").to_string()             # "askchaa#%"
```

The modules:

- `courtclient.paths`: `file_exists`, `dir_exists`, `exists`, `get_base_path`
  and `delay`.
- `courtclient.hardware`: `get_hdid`, the machine identifier sent to servers,
  with a fixed fallback when none can be read.
- `courtclient.options`: `Options` (settings, callwords, mount paths,
  favourites, `get_ui_asset`), `ServerInfo` and `ConnectionType`.
- `courtclient.network`: `Packet`, `PacketAssembler`, `parse_server_list`,
  `MasterServerClient` (server list, heartbeat, documents) and
  `NetworkManager`, which connects to a game server, reads on a background
  thread and hands whole packets to a callback.
- `courtclient.emotes`: `compute_grid`, `paginate`, `EmoteSelector` and
  `preview_name`.
- `courtclient.inventory`: `Evidence`, `evidence_changed`, `load_inventory`,
  `save_inventory` and `paginate_evidence`.
- `courtclient.evidence`: `EvidenceLocker`, global and private evidence lists
  with editing, transfer and autosave of the private inventory.
- `courtclient.lobby`: `Lobby`, `LobbyTab`, `format_server_description`,
  `player_count_text`, `search_servers` and the `main` behind the command.

## What it does not do

There is no graphical interface: no windows, courtroom view, chat box or
settings screen, and the `courtclient` command only prints the server list
rather than offering an interactive lobby. Nothing here plays audio or
animations, interprets the packets a game server sends beyond splitting them,
or plays back recorded demos.