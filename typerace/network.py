"""TCP client and server for the game lobby."""

from __future__ import annotations

import errno
import logging
import os
import select
import socket

from .protocol import (
    BUFFERSIZE,
    HOST_INDEX,
    MAXNAME,
    MAXPLAYERS,
    ClientData,
    GameState,
    MessageType,
    decode_name,
    encode_name_packet,
    encode_ready_packet,
    encode_start_packet,
    host_display_name,
    split_packets,
)

log = logging.getLogger(__name__)

DEFAULT_PORT = 7777

_CONNECT_PENDING = {0, errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY, 10035}


class NetworkError(Exception):
    """Raised when a connection cannot be made or has been lost."""


def is_host(server: ServerNetwork | None) -> bool:
    """Whoever runs a server is the host."""
    return server is not None


class ClientNetwork:
    """A non-blocking connection from a player to the game server."""

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._socket: socket.socket | None = None
        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as exc:
            raise NetworkError(f"cannot resolve {host!r}: {exc}") from exc
        if not infos:
            raise NetworkError(f"cannot resolve {host!r}")
        self._address_info = infos[0]

    def __enter__(self) -> ClientNetwork:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise NetworkError("invalid client socket")
        return self._socket

    def connect(self) -> None:
        """Start connecting to the server without waiting for it."""
        self.close()
        family, kind, proto, _, address = self._address_info
        try:
            sock = socket.socket(family, kind, proto)
        except OSError as exc:
            raise NetworkError(f"cannot create socket: {exc}") from exc
        sock.setblocking(False)
        code = sock.connect_ex(address)
        if code not in _CONNECT_PENDING:
            sock.close()
            raise NetworkError(f"cannot connect to {self.host}:{self.port}: {os.strerror(code)}")
        self._socket = sock

    def wait_until_connected(self, timeout: int) -> bool:
        """Wait up to ``timeout`` milliseconds; return whether the connection is up."""
        sock = self._require_socket()
        _, writable, failed = select.select([], [sock], [sock], max(timeout, 0) / 1000)
        if not writable and not failed:
            return False
        code = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        if code:
            raise NetworkError(f"cannot connect to {self.host}:{self.port}: {os.strerror(code)}")
        return True

    def send_name(self, name: str) -> None:
        """Send the player's chosen name to the server."""
        self.send_packet(encode_name_packet(name))

    def send_packet(self, packet: bytes) -> None:
        """Send raw frame bytes to the server."""
        sock = self._require_socket()
        try:
            sock.sendall(packet)
        except OSError as exc:
            raise NetworkError(f"send failed: {exc}") from exc

    def read(self, size: int = MAXNAME * 4) -> bytes:
        """Return whatever the server has sent, or ``b""`` if nothing is waiting."""
        sock = self._require_socket()
        try:
            data = sock.recv(size)
        except (BlockingIOError, InterruptedError):
            return b""
        except OSError as exc:
            self.close()
            raise NetworkError(f"server connection lost: {exc}") from exc
        if not data:
            self.close()
            raise NetworkError("server closed the connection")
        return data

    def close(self) -> None:
        """Drop the connection; safe to call more than once."""
        if self._socket is not None:
            self._socket.close()
            self._socket = None


class ServerNetwork:
    """The host's listening server, relaying lobby messages between players."""

    def __init__(self, port: int, host: str = "") -> None:
        self.game_state = GameState.LOBBY
        self.players: list[ClientData] = []
        self._sockets: list[socket.socket | None] = []
        self._pending: list[bytes] = []
        try:
            if not host and socket.has_dualstack_ipv6():
                listener = socket.create_server(
                    ("", port), family=socket.AF_INET6, dualstack_ipv6=True
                )
            else:
                listener = socket.create_server((host, port))
        except OSError as exc:
            raise NetworkError(f"cannot create server on port {port}: {exc}") from exc
        listener.setblocking(False)
        self._listener: socket.socket | None = listener
        self.port: int = listener.getsockname()[1]

    def __enter__(self) -> ServerNetwork:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _write(connection: socket.socket, packet: bytes) -> None:
        try:
            connection.sendall(packet)
        except OSError as exc:
            log.debug("write to client failed: %s", exc)

    def _display_name(self, index: int) -> str:
        name = self.players[index].player_name
        return host_display_name(name) if index == HOST_INDEX else name

    def _send_lobby_log(self, connection: socket.socket) -> None:
        for index, player in enumerate(self.players):
            if player.player_name:
                self._write(connection, encode_name_packet(self._display_name(index)))
        for index, player in enumerate(self.players):
            if player.player_name and player.is_ready:
                self._write(connection, encode_ready_packet(index))

    def accept_clients(self) -> None:
        """Accept one waiting connection, if any, and send it the lobby so far."""
        if self._listener is None:
            return
        try:
            connection, _ = self._listener.accept()
        except (BlockingIOError, InterruptedError):
            return
        except OSError as exc:
            log.warning("accept failed: %s", exc)
            return
        if self.game_state is not GameState.LOBBY:
            connection.close()
            log.info("Connection rejected: game already started")
            return
        if len(self.players) >= MAXPLAYERS:
            connection.close()
            log.info("Connection rejected: lobby is full")
            return
        connection.setblocking(False)
        self._sockets.append(connection)
        self.players.append(ClientData())
        self._pending.append(b"")
        self._send_lobby_log(connection)
        log.info("Client %d connected", len(self.players))

    def process_messages(self) -> None:
        """Read every client's waiting frames and relay them to the lobby."""
        for index, connection in enumerate(self._sockets):
            if connection is None:
                continue
            try:
                data = connection.recv(BUFFERSIZE * 4)
            except (BlockingIOError, InterruptedError):
                continue
            except OSError:
                data = b""
            if not data:
                log.info("Client %d disconnected", index)
                connection.close()
                self._sockets[index] = None
                self._pending[index] = b""
                continue
            frames, self._pending[index] = split_packets(self._pending[index] + data)
            for frame in frames:
                self._handle_frame(index, connection, frame)

    def _handle_frame(self, index: int, connection: socket.socket, frame: bytes) -> None:
        kind = frame[0]
        player = self.players[index]
        if kind == MessageType.NAME:
            player.player_name = decode_name(frame)
            self.broadcast(encode_name_packet(self._display_name(index)))
        elif kind == MessageType.READY:
            player.is_ready = True
            self.broadcast(encode_ready_packet(index))
        elif kind == MessageType.START_GAME:
            if index == HOST_INDEX and self.all_players_ready():
                self.game_state = GameState.ONGOING
                self.broadcast(encode_start_packet())
        else:
            self.broadcast(frame, exclude=connection)

    def broadcast(self, packet: bytes, exclude: socket.socket | None = None) -> None:
        """Send ``packet`` to every live client except ``exclude``."""
        for connection in self._sockets:
            if connection is not None and connection is not exclude:
                self._write(connection, packet)

    def all_players_ready(self) -> bool:
        """True when every joined player has declared ready."""
        return all(player.is_ready for player in self.players)

    def close(self) -> None:
        """Close every client connection and stop listening."""
        for index, connection in enumerate(self._sockets):
            if connection is not None:
                connection.close()
                self._sockets[index] = None
        if self._listener is not None:
            self._listener.close()
            self._listener = None