"""Shared utility helpers."""

import argparse


def positive_float(value: str) -> float:
    """argparse type validator: number > 0."""
    try:
        fvalue = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value}")
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"fps must be > 0, got {value}")
    return fvalue
