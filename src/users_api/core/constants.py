"""Patterns and limits shared by the user record rules."""

import re

# Letters (any script) separated by spaces or common name punctuation.
NAME_REGEX = re.compile(r"^[^\W\d_](?:[^\W\d_]|[\s.,'’()&/-])*$")

LINKEDIN_REGEX = re.compile(
    r"^https?://([a-z]{2,3}\.)?linkedin\.com/(in|pub|profile)/[\w%.-]+/?$",
    re.IGNORECASE,
)

MAX_LENGTH_PER_ROLE = 100

UUID_VERSION = 4

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 35
