"""
ledgerhook.__main__ — Entry point for ``python -m ledgerhook``
==============================================================

Wiring:
1. Load .env (webhook URLs, admin key).
2. Configure logging.
3. Serve :mod:`ledgerhook.api.main` with uvicorn (the app builds its
   runtime from ``config.yaml`` on startup).

Run with::

    python -m ledgerhook
"""

from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("ledgerhook")


def main() -> None:
    """Bootstrap and run the relay."""
    load_dotenv()
    port = int(os.getenv("PORT", "3000"))
    logger.info("Starting Ledgerhook on port %d…", port)
    uvicorn.run("ledgerhook.api.main:app", host="0.0.0.0", port=port, log_config=None)


if __name__ == "__main__":
    main()
