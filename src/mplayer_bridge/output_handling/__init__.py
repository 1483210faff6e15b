"""
Output handling components for MPlayer Bridge

Contains answer-line parsing and routing of answers to pending queries.
"""

from .answer_parser import ANSWER_PREFIX, decode_answer, is_answer_line
from .answer_router import AnswerRouter, PendingQuery

__all__ = [
    "ANSWER_PREFIX",
    "decode_answer",
    "is_answer_line",
    "AnswerRouter",
    "PendingQuery"
]
