"""Run the API with uvicorn: `python -m campushub` or the `campushub` script."""

from __future__ import annotations

import uvicorn

from campushub.core.settings import settings


def main() -> None:
    uvicorn.run("campushub.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
