SLOT_IDS = ("A", "B")
MAX_PLAYERS = len(SLOT_IDS)

# Starting progression for every player; clients report levels from here up.
INITIAL_LEVEL = 2

# Room codes: 6 characters drawn from the uppercase base-36 alphabet.
ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ROOM_CODE_MAX_ATTEMPTS = 100

COUNTDOWN_SECONDS = 3.2

__all__ = [
    "SLOT_IDS",
    "MAX_PLAYERS",
    "INITIAL_LEVEL",
    "ROOM_CODE_LENGTH",
    "ROOM_CODE_ALPHABET",
    "ROOM_CODE_MAX_ATTEMPTS",
    "COUNTDOWN_SECONDS",
]
