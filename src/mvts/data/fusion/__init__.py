"""Alignment of independently time-stamped series onto a common timeline."""

from .aligner import merge

__all__ = ["merge"]
