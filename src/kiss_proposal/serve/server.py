"""Helper to launch the generation endpoint under uvicorn from Python."""
from __future__ import annotations
import os
import subprocess
import sys

def build_command() -> list[str]:
    host = os.getenv("HOST", "0.0.0.0")
    port = os.getenv("PORT", "8000")
    workers = os.getenv("WEB_CONCURRENCY", "1")

    return [
        sys.executable,
        "-m",
        "uvicorn",
        "kiss_proposal.serve.fastapi_app:app",
        "--host", host,
        "--port", str(port),
        "--workers", str(workers),
    ]

def main() -> None:
    subprocess.run(build_command(), check=True)

if __name__ == "__main__":
    main()
