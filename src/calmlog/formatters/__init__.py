"""Formatters turn a level/message/timestamp/context tuple into display text."""

from .base import Formatter
from .machine import JsonFormatter, TextFormatter
from .pretty import DIVIDER, PrettyFormatter

__all__ = ["Formatter", "JsonFormatter", "TextFormatter", "PrettyFormatter", "DIVIDER"]
