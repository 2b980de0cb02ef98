"""Constants describing the candidate feed format.

CSV columns (0-indexed):
    0: HostName       5: CountryLong
    1: IP             6: CountryShort
    2: Score          7: NumVpnSessions
    3: Ping           8..14: Uptime, TotalUsers, TotalTraffic, LogType,
    4: Speed                 Operator, Message, OpenVPN_ConfigData_Base64
"""

FIELD_DELIMITER = ","

# Lines starting with these are metadata, not records
COMMENT_MARKERS: tuple[str, ...] = ("*", "#")

# Any line containing this token (case-insensitive) is the column header
HEADER_TOKEN = "hostname"

MIN_FIELD_COUNT = 8

COL_HOST = 0
COL_ADDRESS = 1
COL_LATENCY = 3
COL_THROUGHPUT = 4
COL_REGION_NAME = 5
COL_REGION_CODE = 6
COL_LOAD = 7

# Canonical domain suffix carried by every host identifier
HOST_SUFFIX = ".opengw.net"

DEFAULT_EXCLUDED_REGION_CODE = "IR"

# Numeric fields outside these ranges parse as the default
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
