from enum import StrEnum


class FieldSizes:
    ULID = 26
    NAME = 50
    TITLE = 100
    CONTENT = 1000
    HASH = 255


class BoardLimits:
    NAME_MIN = 4
    NAME_MAX = 50
    NAME_PATTERN = r"^[a-zA-Z0-9-]+$"
    TITLE_MIN = 1
    TITLE_MAX = 100
    CONTENT_MIN = 1
    CONTENT_MAX = 1000
    PIN_PATTERN = r"^[0-9]{4}$"


class PinHashFormat:
    ALGORITHM = "pbkdf2"
    DIGEST = "sha256"
    SEPARATOR = ":"
    COMPONENTS = 4
    SALT_BYTES = 16
    KEY_BYTES = 32


class RateLimitPrefix(StrEnum):
    CREATE_BOARD = "create_board"
    BOARD = "board_rl"


PIN_HEADER = "X-Board-Pin"

HOME_BOARD_ID = "home-board"
HOME_BOARD_NAME = "home"
HOME_BOARD_TITLE = "My Kanban Board"
DEFAULT_COLUMN_TITLES = ("To-do", "In Progress", "Done")
