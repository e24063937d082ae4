"""The lobby screen: entering a name and listing players with their ready state."""

from __future__ import annotations

import pygame

from .protocol import MAXNAME, MAXPLAYERS
from .text import Text, load_font

LIST_X = 100
LIST_Y_START = 100
LIST_Y_STEP = 75
READY_COLUMN_OFFSET = 300

PROMPT_COLOR = (155, 43, 11)
INPUT_COLOR = (233, 233, 233)
NAME_COLOR = (255, 255, 255)
READY_COLOR = (0, 255, 0)
NOT_READY_COLOR = (255, 0, 0)
INSTRUCTION_COLOR = (255, 255, 0)

INSTRUCTION = "Press space when all players ready to start"


def _truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` UTF-8 bytes on a character boundary."""
    return text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


class Lobby:
    """Name entry followed by the list of players in the lobby."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        is_host: bool = False,
        font_path=None,
    ) -> None:
        self.width = width
        self.height = height
        self.is_host = is_host
        self.font = load_font(font_path, 24)
        self.prompt_text = Text(
            self.font, "Enter name:", PROMPT_COLOR, (width // 2, height // 2 - 130)
        )
        self.input_text: Text | None = None
        self.player_name = ""
        self.is_typing = True
        self.names: list[str] = []
        self.ready: list[bool] = []
        self.name_texts: list[Text] = []
        self.ready_texts: list[Text] = []
        self.instruction_text: Text | None = None

    @property
    def is_done_typing(self) -> bool:
        """True once the player has confirmed a name."""
        return not self.is_typing

    @property
    def player_count(self) -> int:
        return len(self.names)

    def _refresh_input(self) -> None:
        if self.player_name:
            self.input_text = Text(
                self.font,
                self.player_name,
                INPUT_COLOR,
                (self.width // 2, self.height // 2 - 40),
            )
        else:
            self.input_text = None

    def handle_name_input(self, event) -> bool:
        """Feed one event to the name field; True when a non-empty name is confirmed."""
        if event.type == pygame.TEXTINPUT:
            if _byte_length(self.player_name) + _byte_length(event.text) < MAXNAME:
                self.player_name += event.text
                self._refresh_input()
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_BACKSPACE:
                if self.player_name:
                    self.player_name = self.player_name[:-1]
                    self._refresh_input()
            elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                if self.player_name:
                    self.is_typing = False
                    return True
        return False

    def _ready_label(self, index: int, ready: bool) -> Text:
        label, color = ("Ready", READY_COLOR) if ready else ("Not Ready", NOT_READY_COLOR)
        return Text(
            self.font,
            label,
            color,
            (LIST_X + READY_COLUMN_OFFSET, LIST_Y_START + index * LIST_Y_STEP),
        )

    def add_player(self, name: str) -> None:
        """Add a player to the first free slot; ignored when empty or the lobby is full."""
        if not name:
            return
        try:
            index = self.names.index("")
        except ValueError:
            if len(self.names) >= MAXPLAYERS:
                return
            index = len(self.names)
            self.names.append("")
            self.ready.append(False)
            self.name_texts.append(None)
            self.ready_texts.append(None)
        stored = _truncate(name, MAXNAME - 1)
        self.names[index] = stored
        self.name_texts[index] = Text(
            self.font, stored, NAME_COLOR, (LIST_X, LIST_Y_START + index * LIST_Y_STEP)
        )
        self.ready[index] = False
        self.ready_texts[index] = self._ready_label(index, False)
        if self.is_host and self.instruction_text is None:
            self.instruction_text = Text(
                self.font,
                INSTRUCTION,
                INSTRUCTION_COLOR,
                (self.width // 2, self.height - 100),
            )

    def set_ready(self, index: int, ready: bool) -> None:
        """Set a player's ready state by slot; unknown slots are ignored."""
        if not 0 <= index < len(self.names):
            return
        self.ready[index] = ready
        self.ready_texts[index] = self._ready_label(index, ready)

    def get_ready(self, index: int) -> bool:
        """Ready state of a slot; False for slots that are not taken."""
        if not 0 <= index < len(self.names):
            return False
        return self.ready[index]

    def all_players_ready(self) -> bool:
        """True when there is at least one player and every one is ready."""
        return bool(self.ready) and all(self.ready)

    def is_player_ready(self, name: str) -> bool:
        """Ready state of the first player with ``name``; False if absent."""
        for player, ready in zip(self.names, self.ready):
            if player == name:
                return ready
        return False

    def set_player_ready(self, name: str, ready: bool) -> None:
        """Set the ready state of the first player with ``name``."""
        for index, player in enumerate(self.names):
            if player == name:
                self.set_ready(index, ready)
                return

    def render_name_input(self, surface: pygame.Surface) -> None:
        """Draw the name prompt and what has been typed so far."""
        self.prompt_text.draw(surface)
        if self.input_text is not None:
            self.input_text.draw(surface)

    def render(self, surface: pygame.Surface) -> None:
        """Draw the player list, ready states and the host's instruction."""
        for name_text, ready_text in zip(self.name_texts, self.ready_texts):
            if name_text is not None:
                name_text.draw(surface)
            if ready_text is not None:
                ready_text.draw(surface)
        if self.instruction_text is not None:
            self.instruction_text.draw(surface)