"""The game window: screens, input handling and the network loop."""

from __future__ import annotations

import argparse
import logging

import pygame

from .lobby import Lobby
from .menu import IpBar, IpBarResult, Menu, MenuChoice
from .network import DEFAULT_PORT, ClientNetwork, NetworkError, ServerNetwork, is_host
from .protocol import (
    MAXNAME,
    GameState,
    MessageType,
    decode_name,
    encode_ready_packet,
    encode_start_packet,
    split_packets,
)

log = logging.getLogger(__name__)

WINDOW_TITLE = "Typeracer"
LOOPBACK = "127.0.0.1"
CONNECT_TIMEOUT_MS = 500
BACKGROUND = (0, 0, 0)
FAILURE_COLOR = (255, 0, 0)


class Game:
    """One player's game: a window, the current screen and its connections."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        port: int = DEFAULT_PORT,
        font_path=None,
        prompt_font_path=None,
    ) -> None:
        self.width = width
        self.height = height
        self.port = port
        self.font_path = font_path
        self.prompt_font_path = prompt_font_path
        pygame.init()
        pygame.display.set_caption(WINDOW_TITLE)
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.menu = Menu(width, height, font_path)
        self.client: ClientNetwork | None = None
        self.server: ServerNetwork | None = None
        self.ip_bar: IpBar | None = None
        self.lobby: Lobby | None = None
        self.state = GameState.MENU
        self.running = True
        self._incoming = b""
        self._closed = False

    def __enter__(self) -> Game:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ----- input -------------------------------------------------------

    def handle_input(self) -> None:
        """Process every waiting window event."""
        for event in pygame.event.get():
            self.handle_event(event)
            if not self.running:
                return

    def handle_event(self, event) -> None:
        """React to one event according to the current screen."""
        if event.type == pygame.QUIT:
            self.running = False
            return
        if self.state is GameState.MENU:
            self._handle_menu(event)
        elif self.state is GameState.ENTER_IP:
            self._handle_ip_bar(event)
        elif self.state is GameState.LOBBY:
            self._handle_lobby(event)

    def _handle_menu(self, event) -> None:
        choice = self.menu.handle_event(event)
        if choice is MenuChoice.CONNECT:
            self.ip_bar = IpBar(self.width, self.height, self.font_path, self.prompt_font_path)
            self.state = GameState.ENTER_IP
            pygame.key.start_text_input()
        elif choice is MenuChoice.HOST_GAME:
            self._host_game()

    def _host_game(self) -> None:
        try:
            server = ServerNetwork(self.port)
        except NetworkError as exc:
            log.error("server network init failed: %s", exc)
            return
        try:
            client = ClientNetwork(LOOPBACK, server.port)
            client.connect()
            if not client.wait_until_connected(CONNECT_TIMEOUT_MS):
                client.close()
                raise NetworkError("host could not complete connection to its own server")
        except NetworkError as exc:
            log.error("host failed to connect to own server: %s", exc)
            server.close()
            return
        self.server = server
        self.client = client
        self._incoming = b""
        self._enter_lobby(is_host=True)

    def _handle_ip_bar(self, event) -> None:
        result = self.ip_bar.handle_event(event)
        if result is IpBarResult.SUBMIT:
            try:
                client = ClientNetwork(self.ip_bar.address, self.port)
            except NetworkError as exc:
                log.error("client network init failed: %s", exc)
                return
            try:
                client.connect()
            except NetworkError as exc:
                log.info("connect failed: %s", exc)
                client.close()
                self.ip_bar.show_status("Failed to connect", FAILURE_COLOR)
                return
            pygame.key.stop_text_input()
            self.ip_bar = None
            self.client = client
            self._incoming = b""
            self._enter_lobby(is_host=False)
        elif result is IpBarResult.CANCEL:
            pygame.key.stop_text_input()
            self.ip_bar = None
            self.state = GameState.MENU

    def _enter_lobby(self, is_host: bool) -> None:
        self.lobby = Lobby(self.width, self.height, is_host, self.font_path)
        self.state = GameState.LOBBY
        pygame.key.start_text_input()

    def _send(self, packet: bytes) -> None:
        if self.client is None:
            log.error("no connection to the server")
            return
        try:
            self.client.send_packet(packet)
        except NetworkError as exc:
            log.error("%s", exc)

    def _handle_lobby(self, event) -> None:
        if self.lobby.is_typing:
            if self.lobby.handle_name_input(event):
                if self.client is not None:
                    try:
                        self.client.send_name(self.lobby.player_name)
                    except NetworkError as exc:
                        log.error("%s", exc)
                # The server broadcasts the name back, so it is not added here.
                pygame.key.stop_text_input()
            return
        if event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
            if is_host(self.server) and self.lobby.all_players_ready():
                self._send(encode_start_packet())
            else:
                # The server fills in the sender's real index.
                self._send(encode_ready_packet(0))

    # ----- network -----------------------------------------------------

    def update(self) -> None:
        """Run the server side, if hosting, then apply what the server sent."""
        if self.server is not None:
            self.server.accept_clients()
            self.server.process_messages()
        while self.client is not None:
            try:
                data = self.client.read(MAXNAME * 4)
            except NetworkError as exc:
                log.warning("%s", exc)
                self.client = None
                self._incoming = b""
                self.state = GameState.MENU
                return
            if not data:
                break
            frames, self._incoming = split_packets(self._incoming + data)
            for frame in frames:
                self._apply(frame)

    def _apply(self, frame: bytes) -> None:
        kind = frame[0]
        if kind == MessageType.NAME:
            if self.lobby is not None:
                self.lobby.add_player(decode_name(frame))
        elif kind == MessageType.READY:
            if self.lobby is not None:
                self.lobby.set_ready(frame[1], True)
        elif kind == MessageType.START_GAME:
            self.state = GameState.ONGOING

    # ----- drawing -----------------------------------------------------

    def render(self) -> None:
        """Draw the current screen and show it."""
        self.screen.fill(BACKGROUND)
        if self.state is GameState.MENU:
            self.menu.render(self.screen)
        elif self.state is GameState.ENTER_IP and self.ip_bar is not None:
            self.ip_bar.render(self.screen)
        elif self.state is GameState.LOBBY and self.lobby is not None:
            if self.lobby.is_done_typing:
                self.lobby.render(self.screen)
            else:
                self.lobby.render_name_input(self.screen)
        pygame.display.flip()

    def run(self) -> None:
        """Loop until the window is closed."""
        while self.running:
            self.handle_input()
            self.update()
            self.render()
            pygame.time.wait(1)

    def close(self) -> None:
        """Drop connections and shut the window; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.lobby = None
        if self.server is not None:
            self.server.close()
            self.server = None
        if self.client is not None:
            self.client.close()
            self.client = None
        self.ip_bar = None
        pygame.quit()


def main(argv=None) -> int:
    """Start the game window."""
    parser = argparse.ArgumentParser(prog="typerace", description="Multiplayer typing race.")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="game server port")
    parser.add_argument("--font", default=None, help="font file for labels")
    parser.add_argument("--prompt-font", default=None, help="font file for the address prompt")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        game = Game(port=args.port, font_path=args.font, prompt_font_path=args.prompt_font)
    except (pygame.error, OSError) as exc:
        print(f"Error initializing game: {exc}")
        pygame.quit()
        return 1
    with game:
        game.run()
    return 0