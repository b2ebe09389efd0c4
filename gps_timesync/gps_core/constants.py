"""GPS/NMEA protocol constants and configuration defaults."""

# Framing
SENTENCE_START = b"$"
LINE_TERMINATOR = b"\n"
CARRIAGE_RETURN = b"\r"
FIELD_DELIMITER = ","
MAX_SENTENCE_LENGTH = 82  # bytes from '$' up to, excluding, the terminator

# Two-digit years below the pivot are 20xx, the rest 19xx
CENTURY_PIVOT = 80

# RMC/GLL status field
STATUS_VALID = "A"
STATUS_VOID = "V"

# NMEA 2.3 positioning mode indicator that marks data as not valid
MODE_NOT_VALID = "N"

# GGA fix quality value meaning "no fix"
FIX_QUALITY_INVALID = 0

# Time-bearing sentence ids handled by the parser
SUPPORTED_SENTENCES = ("RMC", "GGA", "GLL", "ZDA")

# Default serial/runtime configuration
DEFAULT_BAUD_RATE = None  # pyserial default (9600)
DEFAULT_READ_CHUNK_SIZE = 256
DEFAULT_READ_TIMEOUT = 1.0
DEFAULT_FIX_TIMEOUT = 60.0
DEFAULT_MIN_DRIFT = 0.0
