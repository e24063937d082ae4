# typerace

A small multiplayer typing game built on pygame. One player hosts a game
and the others join by entering the host's address. Everyone picks a name
in the lobby and marks themselves ready; the host then starts the game once
all players are ready.

## Installing

```
pip install .
```

## Playing

Start the game window with:

```
typerace
```

Options:

- `--port PORT` – the game server port to host on or join (default 7777).
- `--font PATH` – a font file for the labels; pygame's default font is used
  when none is given.
- `--prompt-font PATH` – a font file for the "Enter server IP:" prompt;
  pygame's default font is used when none is given.

The main menu offers:

- **CONNECT** – type the host's address and press Enter to join. If the
  connection cannot be started, "Failed to connect" is shown under the
  field. Press Escape to go back to the menu.
- **HOST GAME** – start a server on the chosen port and join it yourself
  over the loopback address.

In the lobby, type your name (up to 11 bytes of UTF-8) and press Enter.
Then press Space to mark yourself ready. The host's name is shown with a
`(HOST)` tag, cut to fit the 11-byte name field. When every player is
ready, the host presses Space again to start the game. At most four
players fit in a lobby, and the server turns away anyone who tries to join
once a game has started.

## Package layout

- `typerace.protocol` – the wire format: fixed 12-byte frames whose first
  byte is a `MessageType` (`NAME`, `READY`, `START_GAME`), with
  `encode_name_packet`, `encode_ready_packet`, `encode_start_packet`,
  `decode_name`, `split_packets` and `host_display_name`; also `GameState`
  and `ClientData`.
- `typerace.network` – `ServerNetwork`, a non-blocking TCP server that
  accepts players, sends newcomers the lobby so far and relays name, ready
  and start messages; `ClientNetwork`, a non-blocking connection to it;
  `is_host`; and `NetworkError`, raised when a connection fails or is lost.
- `typerace.lobby` – `Lobby`, the name entry field and the player list with
  ready states.
- `typerace.menu` – `Menu`, the title screen, and `IpBar`, the address
  field; `MenuChoice` and `IpBarResult` report what an event did.
- `typerace.text` – `Text`, a label rendered once and centred on a point,
  and `load_font`.
- `typerace.app` – `Game`, the window and its main loop, and `main`, the
  entry point of the `typerace` command.

## What it does not do

- There is no race yet: once the host starts the game, every player's
  window shows a blank black screen.
- The **SETTINGS** button is drawn but does nothing when clicked.
- If the server connection is lost, the game returns to the menu without
  a message on screen; the reason is only logged.

## Running the tests

```
pip install .[test]
pytest
```