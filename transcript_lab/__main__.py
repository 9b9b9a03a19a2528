"""Package entry point for ``python -m transcript_lab``.

WHY: Users run the converter as ``python -m transcript_lab response.json``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from transcript_lab.cli import main

if __name__ == "__main__":
    main()
