from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

from livaulislam import create_app  # noqa: E402

app = create_app()


def main() -> None:
    try:
        app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", 5000)))
    finally:
        app.extensions["livaulislam"].close()


if __name__ == "__main__":
    main()
