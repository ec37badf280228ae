from __future__ import annotations

import os

import uvicorn


def main() -> None:
    host = (os.getenv("OIML_HOST") or "127.0.0.1").strip()
    port = int((os.getenv("OIML_PORT") or "8000").strip())
    uvicorn.run("oiml.api.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
