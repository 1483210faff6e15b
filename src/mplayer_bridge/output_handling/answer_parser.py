"""
Answer line parsing for the mplayer slave protocol

mplayer reports queried properties as ``ANS_<name>=<value>`` lines mixed in
with its ordinary console output.
"""

from typing import Optional, Tuple

ANSWER_PREFIX = "ANS_"

# Name mplayer uses when a get_property request fails,
# e.g. ANS_ERROR=PROPERTY_UNAVAILABLE
ERROR_ANSWER = "ERROR"


def is_answer_line(line: str) -> bool:
    """Check whether a raw output line carries a property answer"""
    return line.startswith(ANSWER_PREFIX)


def decode_answer(line: str) -> Optional[Tuple[str, str]]:
    """Decode an answer line into (name, value).

    Returns None for lines that are not answers. Only the first '=' separates
    name from value, so values such as file paths may contain '='.
    """
    if not is_answer_line(line):
        return None

    body = line[len(ANSWER_PREFIX):].rstrip('\r\n')
    name, _, value = body.partition('=')
    return name, value
