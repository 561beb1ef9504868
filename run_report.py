#!/usr/bin/env python3
"""Diagnostics for the command-line tools. Everything here goes to stderr, never to the data output."""
import sys
import time
from typing import Iterable, Optional


def log(msg: str):
    print(msg, file=sys.stderr, flush=True)


def warn(msg: str):
    log(f"[WARN] {msg}")


def echo_parameters(params: Iterable[tuple[str, object]]):
    lines = ["", "Parameters:"]
    lines += [f"\t-{flag} {value}" for flag, value in params if value is not None]
    log("\n".join(lines) + "\n")


def format_elapsed(seconds: int) -> Optional[str]:
    """`Run finished in ...` text, or None for runs of five seconds or less."""
    seconds = int(seconds)
    hour, minute = seconds // 3600, seconds // 60
    if hour > 0:
        return f"Run finished in {hour} h, {minute - hour * 60} min & {seconds - minute * 60} sec"
    if minute > 0:
        return f"Run finished in {minute} min & {seconds - minute * 60} sec"
    if seconds > 5:
        return f"Run finished in {seconds} sec"
    return None


def report_elapsed(started: float):
    text = format_elapsed(time.time() - started)
    if text:
        log(f"\n{text}\n")
