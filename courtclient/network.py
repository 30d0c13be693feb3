"""Server connections, the wire packet format and the master server API."""

from __future__ import annotations

import codecs
import json
import logging
import socket
import threading
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import websocket

from .options import ConnectionType, Options, ServerInfo

log = logging.getLogger(__name__)

USER_AGENT = "courtclient"
_GOING_AWAY = 1001
_NO_DESCRIPTION = "No description provided."


@dataclass
class Packet:
    """One protocol message: a header followed by its fields."""

    header: str
    contents: list[str] = field(default_factory=list)

    def to_string(self) -> str:
        """Return the packet as it is written on the wire."""
        return "#".join([self.header, *self.contents]) + "#%"


class PacketAssembler:
    """Turns a stream of text chunks into whole packets."""

    def __init__(self):
        self._pending = ""

    def feed(self, data: str) -> list[Packet]:
        """Add received text and return the packets it completes."""
        if not data.endswith("%"):
            self._pending += data
            return []
        data = self._pending + data
        self._pending = ""
        packets = []
        for chunk in data.split("%"):
            if not chunk:
                continue
            if chunk.endswith("#"):
                chunk = chunk[:-1]
            header, *contents = chunk.split("#")
            packets.append(Packet(header, contents))
        return packets


def _json_int(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if float(value).is_integer():
        return int(value)
    return 0


def _json_str(value, default: str = "") -> str:
    return value if isinstance(value, str) else default


def parse_server_list(payload) -> list[ServerInfo]:
    """Parse the master server's JSON server list.

    Raises ValueError when the payload is not valid JSON.
    """
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    try:
        document = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid JSON response from master server") from exc
    if not isinstance(document, list):
        return []
    servers = []
    for entry in document:
        if not isinstance(entry, dict):
            continue
        ws_port = entry.get("ws_port")
        if isinstance(ws_port, (int, float)) and not isinstance(ws_port, bool):
            socket_type = ConnectionType.WEBSOCKETS
            port = _json_int(ws_port)
        else:
            socket_type = ConnectionType.TCP
            port = _json_int(entry.get("port"))
        if port == 0:
            continue
        servers.append(
            ServerInfo(
                ip=_json_str(entry.get("ip")),
                port=port,
                name=_json_str(entry.get("name")),
                desc=_json_str(entry.get("description"), _NO_DESCRIPTION),
                socket_type=socket_type,
            )
        )
    return servers


class DocumentType(Enum):
    """Documents published by the master server, by endpoint."""

    PRIVACY_POLICY = "/privacy"
    MOTD = "/motd"
    CLIENT_VERSION = "/version"


class MasterServerClient:
    """Talks to the master server that lists public game servers."""

    def __init__(self, options: Options, base_url: str = ""):
        self.options = options
        master = options.get("master")
        if master and urllib.parse.urlsplit(master).scheme.startswith("http"):
            log.info("using alternate master server %s", master)
            base_url = master
        if not base_url:
            raise ValueError("no master server address configured")
        self.base_url = base_url
        self.timeout = 10.0

    def _request(self, endpoint: str, data: Optional[bytes] = None) -> urllib.request.Request:
        request = urllib.request.Request(
            self.base_url + endpoint,
            data=data,
            method="GET" if data is None else "POST",
        )
        request.add_header("User-Agent", USER_AGENT)
        return request

    def get_server_list(self) -> list[ServerInfo]:
        """Fetch and return the public server list."""
        request = self._request("/servers")
        with urllib.request.urlopen(request, timeout=self.timeout) as response:
            body = response.read()
        servers = parse_server_list(body)
        log.debug("Got valid response from %s", request.full_url)
        return servers

    def send_heartbeat(self) -> bool:
        """Report that this client is playing; False if opted out or failed."""
        if self.options.get("player_count_optout"):
            return False
        request = self._request("/playing", data=b"")
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                response.read()
        except OSError as exc:
            log.debug("Heartbeat failed: %s", exc)
            return False
        return True

    def request_document(self, document_type: DocumentType) -> str:
        """Fetch a document; an empty string if it could not be had."""
        endpoint = document_type.value
        request = self._request(endpoint)
        language = self.options.get("language")
        if not language.strip():
            language = Options._default("language")
        request.add_header("Accept-Language", language)
        log.debug("Getting %s, Accept-Language: %s", endpoint, language)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                content = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as exc:
            log.debug("Failed to get %s (http status %s)", endpoint, exc.code)
            return ""
        except OSError as exc:
            log.debug("Failed to get %s (%s)", endpoint, exc)
            return ""
        if not content or status != 200:
            log.debug("Failed to get %s (http status %s)", endpoint, status)
            return ""
        return content


class NetworkManager:
    """A connection to one game server over TCP or WebSockets."""

    def __init__(
        self,
        on_packet: Callable[[Packet], None],
        on_disconnect: Optional[Callable[[], None]] = None,
    ):
        self.on_packet = on_packet
        self.on_disconnect = on_disconnect
        self.connected = False
        self.connection_type = ConnectionType.TCP
        self.timeout = 10.0
        self._assembler = PacketAssembler()
        self._tcp: Optional[socket.socket] = None
        self._ws: Optional[websocket.WebSocket] = None
        self._lock = threading.Lock()

    def connect_to_server(self, server: ServerInfo) -> None:
        """Drop any current connection and connect to ``server``."""
        self.disconnect_from_server()
        log.info("connecting to %s:%s", server.ip, server.port)
        self._assembler = PacketAssembler()
        if server.socket_type is ConnectionType.WEBSOCKETS:
            log.info("using WebSockets backend")
            ws = websocket.WebSocket()
            ws.connect(
                f"ws://{server.ip}:{server.port}",
                header=[f"User-Agent: {USER_AGENT}"],
                timeout=self.timeout,
            )
            ws.settimeout(None)
            with self._lock:
                self._ws = ws
            handle, target = ws, self._read_ws
        else:
            log.info("using TCP backend")
            sock = socket.create_connection((server.ip, server.port), timeout=self.timeout)
            sock.settimeout(None)
            with self._lock:
                self._tcp = sock
            handle, target = sock, self._read_tcp
        self.connection_type = server.socket_type
        self.connected = True
        log.debug("established connection to server")
        threading.Thread(target=target, args=(handle,), name="server-reader", daemon=True).start()

    def _read_tcp(self, sock: socket.socket) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")("replace")
        try:
            while True:
                chunk = sock.recv(65536)
                if not chunk:
                    break
                text = decoder.decode(chunk)
                if text:
                    self.handle_server_packet(text)
        except OSError as exc:
            log.debug("TCP socket error: %s", exc)
        self._lost(sock)

    def _read_ws(self, ws: websocket.WebSocket) -> None:
        try:
            while ws.connected:
                message = ws.recv()
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                if message:
                    self.handle_server_packet(message)
        except (websocket.WebSocketException, OSError) as exc:
            log.debug("WebSockets error: %s", exc)
        self._lost(ws)

    def _lost(self, handle) -> None:
        with self._lock:
            if handle is not self._tcp and handle is not self._ws:
                return
            self._tcp = None
            self._ws = None
            self.connected = False
        try:
            handle.close()
        except (OSError, websocket.WebSocketException):
            pass
        if self.on_disconnect is not None:
            self.on_disconnect()

    def disconnect_from_server(self) -> None:
        """Close the current connection, if any."""
        if not self.connected:
            return
        with self._lock:
            tcp, ws = self._tcp, self._ws
            self._tcp = None
            self._ws = None
            self.connected = False
        if tcp is not None:
            try:
                tcp.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            tcp.close()
        if ws is not None:
            try:
                ws.close(status=_GOING_AWAY)
            except (websocket.WebSocketException, OSError):
                pass

    def join_to_server(self) -> None:
        """Ask the server to let this client join."""
        self.ship_server_packet(Packet("askchaa"))

    def ship_server_packet(self, packet) -> None:
        """Send a Packet or an already encoded packet string."""
        text = packet.to_string() if isinstance(packet, Packet) else str(packet)
        with self._lock:
            if self.connection_type is ConnectionType.WEBSOCKETS:
                if self._ws is None:
                    raise ConnectionError("not connected to a server")
                self._ws.send(text)
            else:
                if self._tcp is None:
                    raise ConnectionError("not connected to a server")
                self._tcp.sendall(text.encode("utf-8"))

    def handle_server_packet(self, data: str) -> None:
        """Pass received text on as whole packets."""
        for packet in self._assembler.feed(data):
            self.on_packet(packet)