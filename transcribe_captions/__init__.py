"""transcribe_captions: Amazon Transcribe to SRT-style captions.

WHY: Amazon Transcribe returns a flat list of timed words and
punctuation marks. Viewers need short, numbered caption cues. This
package runs the whole round trip for one media file: stage it in S3,
transcribe it, segment the result into cues, and write a caption file.

HOW: Three-stage pipeline: remote (api clients for S3 and Transcribe),
segment (core IR and segmenter), render (formatters). workflow.py drives
the stages in order; cli.py is the command-line front end.

RULES:
- The segmenter and formatter are pure and never touch the network
- All remote calls go through the api package
- One run per process; no batch processing
"""

__version__ = "0.1.0"
