"""Constants for mocksocket.

Values here must match the browser WebSocket API exactly, since code written
against the real API is expected to run unchanged against the mock.
"""

# Close codes accepted from callers of WebSocket.close()
CLOSE_CODE_NORMAL = 1000
APP_CLOSE_CODE_MIN = 3000
APP_CLOSE_CODE_MAX = 4999

MAX_CLOSE_REASON_BYTES = 123
"""Maximum close reason length, measured in UTF-8 bytes.

A close frame carries at most 125 bytes of payload, two of which hold the code.
"""

DEFAULT_BINARY_TYPE = "blob"

ALLOWED_URL_SCHEMES = frozenset({"ws", "wss"})

# RFC 7230 token separators; sub-protocol names are tokens
PROTOCOL_SEPARATORS = frozenset('()<>@,;:\\"/[]?={} \t')

# Error message prefixes, as reported by browsers
CONSTRUCTOR_ERROR_PREFIX = "Failed to construct 'WebSocket':"
CLOSE_ERROR_PREFIX = "Failed to execute 'close' on 'WebSocket':"
SEND_ERROR_PREFIX = "Failed to execute 'send' on 'WebSocket':"

# Event types with a single-slot on<type> property
SLOT_EVENT_TYPES = ("open", "message", "close", "error")
