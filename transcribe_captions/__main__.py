"""Package entry point for ``python -m transcribe_captions``.

RULES:
- This file must exist for ``python -m transcribe_captions`` to work
- All argument handling lives in cli.main()
"""

if __name__ == "__main__":
    from transcribe_captions.cli import main
    main()
