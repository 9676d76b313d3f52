import os
from pathlib import Path


def get_configfile() -> Path | None:
    # Priority: ENV > optional file in current working directory
    raw = os.getenv("SURROGATE_CONFIG")

    if raw is None:
        file = Path.cwd() / "surrogate.yaml"
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Fix or unset the SURROGATE_CONFIG environment variable\n"
            "  - Or place a 'surrogate.yaml' file in the current working directory."
        )

    return file
