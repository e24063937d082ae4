"""Main menu and the server address entry bar."""

from __future__ import annotations

from enum import IntEnum

import pygame

from .text import Text, load_font

TITLE_COLOR = (145, 125, 224)
BUTTON_COLOR = (200, 200, 200)
PROMPT_COLOR = (255, 255, 255)
INPUT_COLOR = (200, 198, 145)

IP_BUFFER_SIZE = 64


class MenuChoice(IntEnum):
    """What a click in the main menu selected."""

    NONE = 0
    CONNECT = 1
    HOST_GAME = 2
    SETTINGS = 3


class IpBarResult(IntEnum):
    """Outcome of an event fed to the address bar."""

    NONE = 0
    SUBMIT = 1
    CANCEL = 2


def _inside(rect: pygame.Rect, x: float, y: float) -> bool:
    return rect.x <= x <= rect.x + rect.w and rect.y <= y <= rect.y + rect.h


class Menu:
    """The title screen with its buttons."""

    def __init__(self, width: int = 800, height: int = 600, font_path=None) -> None:
        self.width = width
        self.height = height
        self.title_font = load_font(font_path, 80)
        self.button_font = load_font(font_path, 50)
        center_x = width // 2
        self.title_text = Text(self.title_font, "Typeracer", TITLE_COLOR, (center_x, 100))
        self.connect_text = Text(self.button_font, "CONNECT", BUTTON_COLOR, (center_x, 250))
        self.host_game_text = Text(self.button_font, "HOST GAME", BUTTON_COLOR, (center_x, 350))
        self.settings_text = Text(self.button_font, "SETTINGS", BUTTON_COLOR, (center_x, 450))

    def handle_event(self, event) -> MenuChoice:
        """Return the button hit by a left click, or ``MenuChoice.NONE``."""
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != pygame.BUTTON_LEFT:
            return MenuChoice.NONE
        x, y = event.pos
        if _inside(self.connect_text.rect, x, y):
            return MenuChoice.CONNECT
        if _inside(self.host_game_text.rect, x, y):
            return MenuChoice.HOST_GAME
        return MenuChoice.NONE

    def render(self, surface: pygame.Surface) -> None:
        """Draw the title and buttons."""
        for label in (self.title_text, self.connect_text, self.host_game_text, self.settings_text):
            label.draw(surface)


class IpBar:
    """A text field for typing the server's address."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        font_path=None,
        prompt_font_path=None,
    ) -> None:
        self.width = width
        self.height = height
        self.prompt_font = load_font(prompt_font_path, 35)
        self.input_font = load_font(font_path, 25)
        self.prompt_text = Text(
            self.prompt_font, "Enter server IP:", PROMPT_COLOR, (width // 2, height // 2 - 100)
        )
        self.input_text: Text | None = None
        self.status_text: Text | None = None
        self.address = ""

    def _refresh_input(self) -> None:
        if self.address:
            self.input_text = Text(
                self.input_font,
                self.address,
                INPUT_COLOR,
                (self.width // 2, self.height // 2 - 50),
            )
        else:
            self.input_text = None

    def handle_event(self, event) -> IpBarResult:
        """Feed one event to the field and report whether it was submitted or cancelled."""
        if event.type == pygame.TEXTINPUT:
            if len(self.address.encode("utf-8")) + len(event.text.encode("utf-8")) < IP_BUFFER_SIZE:
                self.address += event.text
                self._refresh_input()
            return IpBarResult.NONE
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_BACKSPACE:
                if self.address:
                    self.address = self.address[:-1]
                    self._refresh_input()
            elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                if self.address:
                    return IpBarResult.SUBMIT
            elif event.key == pygame.K_ESCAPE:
                return IpBarResult.CANCEL
        return IpBarResult.NONE

    def show_status(self, message: str, color) -> None:
        """Show a status line below the field, replacing any earlier one."""
        self.status_text = Text(
            self.input_font, message, color, (self.width // 2, self.height // 2 + 50)
        )

    def render(self, surface: pygame.Surface) -> None:
        """Draw the prompt, the typed address and any status line."""
        self.prompt_text.draw(surface)
        if self.input_text is not None:
            self.input_text.draw(surface)
        if self.status_text is not None:
            self.status_text.draw(surface)