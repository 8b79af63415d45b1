"""Allow running ScriptLex as ``python -m scriptlex``."""

from scriptlex.cli import main

if __name__ == "__main__":
    main()
