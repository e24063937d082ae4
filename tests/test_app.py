import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import time

import pygame
import pytest

from typerace.app import Game, main
from typerace.menu import IpBar
from typerace.network import ClientNetwork, ServerNetwork
from typerace.protocol import (
    GameState,
    encode_name_packet,
    encode_ready_packet,
    encode_start_packet,
)


@pytest.fixture
def game():
    g = Game(port=0)
    yield g
    g.close()


def _wait(step, predicate, tries=300):
    for _ in range(tries):
        step()
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def _click(rect):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=rect.center, button=pygame.BUTTON_LEFT)


def _key(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def _text(text):
    return pygame.event.Event(pygame.TEXTINPUT, text=text)


def test_starts_in_menu(game):
    assert game.state is GameState.MENU
    assert game.running is True
    assert game.client is None and game.server is None


def test_quit_event_stops(game):
    game.handle_event(pygame.event.Event(pygame.QUIT))
    assert game.running is False


def test_handle_input_reads_queue(game):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    game.handle_input()
    assert game.running is False


def test_connect_opens_ip_bar_and_escape_returns(game):
    game.handle_event(_click(game.menu.connect_text.rect))
    assert game.state is GameState.ENTER_IP
    assert isinstance(game.ip_bar, IpBar)
    game.handle_event(_key(pygame.K_ESCAPE))
    assert game.state is GameState.MENU
    assert game.ip_bar is None


def test_click_elsewhere_keeps_menu(game):
    game.handle_event(
        pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(0, 0), button=pygame.BUTTON_LEFT)
    )
    assert game.state is GameState.MENU


def test_render_menu_draws_buttons(game):
    game.render()
    area = game.menu.connect_text.rect.clip(game.screen.get_rect())
    colour = pygame.transform.average_color(game.screen, area)
    assert max(colour[:3]) > 0


def test_render_ongoing_is_blank(game):
    game.state = GameState.ONGOING
    game.render()
    area = game.menu.connect_text.rect.clip(game.screen.get_rect())
    colour = pygame.transform.average_color(game.screen, area)
    assert tuple(colour[:3]) == (0, 0, 0)


def test_host_full_round(game):
    game.handle_event(_click(game.menu.host_game_text.rect))
    assert game.state is GameState.LOBBY
    assert game.lobby.is_host is True
    assert game.server is not None

    game.handle_event(_text("Ann"))
    game.handle_event(_key(pygame.K_RETURN))
    assert game.lobby.is_done_typing
    assert _wait(game.update, lambda: "Ann (HOST)" in game.lobby.names)

    game.handle_event(_key(pygame.K_SPACE))
    assert _wait(game.update, lambda: game.lobby.get_ready(0))

    game.handle_event(_key(pygame.K_SPACE))
    assert _wait(game.update, lambda: game.state is GameState.ONGOING)


def test_host_sees_other_player(game):
    game.handle_event(_click(game.menu.host_game_text.rect))
    with ClientNetwork("127.0.0.1", game.server.port) as other:
        other.connect()
        assert other.wait_until_connected(1000)
        other.send_name("Bob")
        assert _wait(game.update, lambda: "Bob" in game.lobby.names)
        assert game.lobby.all_players_ready() is False


def test_host_cannot_start_before_others_ready(game):
    game.handle_event(_click(game.menu.host_game_text.rect))
    with ClientNetwork("127.0.0.1", game.server.port) as other:
        other.connect()
        assert other.wait_until_connected(1000)
        game.handle_event(_text("Ann"))
        game.handle_event(_key(pygame.K_RETURN))
        other.send_name("Bob")
        assert _wait(game.update, lambda: len(game.lobby.names) == 2)
        game.handle_event(_key(pygame.K_SPACE))
        assert _wait(game.update, lambda: game.lobby.get_ready(0))
        assert game.lobby.get_ready(1) is False
        game.handle_event(_key(pygame.K_SPACE))
        for _ in range(20):
            game.update()
            time.sleep(0.005)
        assert game.state is GameState.LOBBY


def test_join_server_and_apply_messages(game):
    with ServerNetwork(0, host="127.0.0.1") as server:
        game.port = server.port
        game.handle_event(_click(game.menu.connect_text.rect))
        game.handle_event(_text("127.0.0.1"))
        game.handle_event(_key(pygame.K_RETURN))
        assert game.state is GameState.LOBBY
        assert game.ip_bar is None
        assert game.lobby.is_host is False
        assert _wait(server.accept_clients, lambda: len(server.players) == 1)

        server.broadcast(encode_name_packet("Zed"))
        assert _wait(game.update, lambda: "Zed" in game.lobby.names)
        server.broadcast(encode_ready_packet(0))
        assert _wait(game.update, lambda: game.lobby.get_ready(0))
        server.broadcast(encode_start_packet())
        assert _wait(game.update, lambda: game.state is GameState.ONGOING)


def test_lost_server_returns_to_menu(game):
    server = ServerNetwork(0, host="127.0.0.1")
    game.port = server.port
    game.handle_event(_click(game.menu.connect_text.rect))
    game.handle_event(_text("127.0.0.1"))
    game.handle_event(_key(pygame.K_RETURN))
    assert _wait(server.accept_clients, lambda: len(server.players) == 1)
    server.close()
    assert _wait(game.update, lambda: game.state is GameState.MENU)
    assert game.client is None


def test_close_is_idempotent(game):
    game.handle_event(_click(game.menu.host_game_text.rect))
    game.close()
    game.close()
    assert game.server is None and game.client is None and game.lobby is None


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit) as info:
        main(["--port", "abc"])
    assert info.value.code == 2