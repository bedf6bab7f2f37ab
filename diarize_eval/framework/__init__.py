#!/usr/bin/env python3
"""
Command line entry points.
"""

from diarize_eval.framework.runner import main

__all__ = [
    'main'
]
