"""Core segmentation and intermediate representation modules.

WHY: The core package holds the part of the converter with real logic:
the IR dataclasses, caption timestamp formatting, and the segmentation
pass that turns transcript items into cues. None of it touches AWS.

HOW: ir.py defines the data structures, timecode.py formats offsets,
segmenter.py builds cues from ordered transcript items.

RULES:
- IR dataclasses are the contract between parsing and formatting
- Everything here is pure and synchronous; no I/O
"""
