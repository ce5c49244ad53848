from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


def load_dotenv_if_present(path: str | None = None) -> bool:
    """
    Read a .env file (default: ".env" in CWD) into os.environ for local runs.

    Variables already set in the environment win over the file, so a pod
    spec or CI job is never overridden. Returns True when a file was read.
    """
    env_path = Path(path or ".env")
    if not env_path.is_file():
        return False
    load_dotenv(env_path, override=False)
    return True


__all__ = ["load_dotenv_if_present"]
