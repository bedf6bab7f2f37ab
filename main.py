#!/usr/bin/env python3
# main.py - diarize-eval CLI runner

from __future__ import annotations

from diarize_eval.framework.runner import main

if __name__ == "__main__":
    raise SystemExit(main())
