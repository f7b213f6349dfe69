"""
Fixed bounds shared by the name extractors and the hostname matcher.
"""

# Size of the buffer a single certificate name is extracted into, including
# room for a terminator. Names that do not fit are reported, never truncated.
MAX_NAME_SIZE = 256
MAX_NAME_LENGTH = MAX_NAME_SIZE - 1

# Upper bound on the number of subjectAltName entries we are willing to walk
# for a single certificate.
MAX_ALT_NAMES = 1024

WILDCARD_PREFIX = "*."
