#!/usr/bin/env python3
# lib/environment.py - Environment setup and path checks

from __future__ import annotations
import os
import pathlib
from typing import Optional, Sequence
from dotenv import load_dotenv

from diarize_eval.lib.logging_config import FormatError

# Load environment variables from .env file
load_dotenv()

ENV_PREFIX = "DIARIZE_EVAL_"


# ---------- environment values ----------
def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or not value.strip():
        return default
    return value.strip()

def env_int(name: str, default: int) -> int:
    value = env_str(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Warning: {ENV_PREFIX}{name}={value!r} is not an integer. Using default {default}.")
        return default

def env_bool(name: str, default: bool) -> bool:
    value = env_str(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}

def env_choice(name: str, default: str, choices: Sequence[str]) -> str:
    value = env_str(name)
    if value is None:
        return default
    if value.upper() not in choices:
        print(f"Warning: {ENV_PREFIX}{name}={value!r} is not one of {', '.join(choices)}. Using default {default}.")
        return default
    return value.upper()


# ---------- simple checks ----------
def ensure_file(path: str | pathlib.Path, label: str) -> pathlib.Path:
    p = pathlib.Path(path).expanduser().resolve()
    if not p.is_file():
        raise FormatError(f"{label} file not found: {p}", path=str(p))
    return p
