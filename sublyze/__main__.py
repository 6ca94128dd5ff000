"""Package entry point for ``python -m sublyze``.

``python -m sublyze --serve`` starts the HTTP API; anything else is handed
to the command-line transcriber.
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from sublyze.server.app import run_api
        run_api()
    else:
        from sublyze.cli import main
        main()
