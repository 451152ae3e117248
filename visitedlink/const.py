# ==================================================
# visitedlink/const.py
# ==================================================
SIGNATURE = 0x6b6e4c56     # "VLnk" read as little-endian int32
VERSION = 3
HEADER_FMT = "<iiii8s"     # signature, version, length, used, salt
HEADER_SIZE = 24
SALT_SIZE = 8
SLOT_FMT = "<Q"            # 0 = empty, otherwise a fingerprint
SLOT_SIZE = 8
EMPTY = 0
DEFAULT_LENGTH = 16381     # prime; what a fresh browser profile starts with
