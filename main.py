"""Frost Journey — dev launcher. Serves the session API with uvicorn."""

import argparse
import logging
import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = os.getenv("PORT", "13113")


def main():
    parser = argparse.ArgumentParser(description="Frost Journey session server")
    parser.add_argument("--scripted", action="store_true",
                        help="Use canned replies and portrait instead of the generation service")
    parser.add_argument("--reload", action="store_true",
                        help="Restart the server when source files change")
    parser.add_argument("--debug", action="store_true",
                        help="Log engine transitions and timer activity")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # The app reads its settings from the environment when imported.
    if args.scripted:
        os.environ["FROST_SCRIPTED"] = "1"

    print(f"Starting session API on http://{HOST}:{PORT}/api ...")
    uvicorn.run("frost_journey.api.app:app", host=HOST, port=int(PORT), reload=args.reload)


if __name__ == "__main__":
    main()
