"""
Centralized constants for the csvscout sniffer.
"""

# ==============================================================================
# STAGE 1: SAMPLER CONFIGURATION
# ==============================================================================
# How many lines to analyze
SNIFF_WINDOW_SIZE = 100

# ==============================================================================
# STAGE 2: LINE STATISTICS CONFIGURATION
# ==============================================================================
# Characters counted as potential field separators on every line.
# The comma is the delimiter of the produced format by default, so it competes too.
DELIMITER_CANDIDATES = " :;|\t+~"
DEFAULT_DELIMITER = ","

# Characters tracked outside the delimiter set. Only the first two may quote.
NON_DELIMITER_CHARS = "\"'<>\\"
ESCAPE_CHAR = "\\"

# ==============================================================================
# STAGE 3: QUOTE DETECTOR CONFIGURATION
# ==============================================================================
QUOTE_CANDIDATES = ('"', "'")
DEFAULT_QUOTE_CHAR = '"'

# ==============================================================================
# STAGE 4: DELIMITER RANKER CONFIGURATION
# ==============================================================================
# Most preferred first (data.gov survey of delimiters in the wild)
DELIMITER_PREFERENCE = ",\t;:|~+ "

# ==============================================================================
# PREVIEW / OUTPUT CONFIGURATION
# ==============================================================================
PREVIEW_ROWS = 5
LOG_LEVEL_ENV_VAR = "CSVSCOUT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
