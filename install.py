#!/usr/bin/env python3
"""Install script for tgbot-kit.

Usage:
    python install.py          # Library install into ./.venv
    python install.py --dev    # Development install (includes pytest)
"""

import os
import platform
import shutil
import subprocess
import sys

MIN_PYTHON = (3, 11)


def main() -> None:
    if sys.version_info < MIN_PYTHON:
        sys.exit(
            f"Error: Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]}+ is required. "
            f"You have {sys.version_info.major}.{sys.version_info.minor}."
        )

    dev = "--dev" in sys.argv
    project_dir = os.path.dirname(os.path.abspath(__file__))
    venv_dir = os.path.join(project_dir, ".venv")
    bin_dir = "Scripts" if platform.system() == "Windows" else "bin"
    pip = os.path.join(venv_dir, bin_dir, "pip")

    if not os.path.isdir(venv_dir):
        print("Creating virtual environment...")
        subprocess.check_call([sys.executable, "-m", "venv", venv_dir])

    subprocess.check_call([pip, "install", "--upgrade", "pip"])
    target = ".[dev]" if dev else "."
    print(f"Installing tgbot-kit ({target})...")
    subprocess.check_call([pip, "install", "-e", target], cwd=project_dir)

    os.makedirs(os.path.join(project_dir, "data"), exist_ok=True)

    for src, dst in [("config.example.yaml", "config.yaml"), (".env.example", ".env")]:
        src_path = os.path.join(project_dir, src)
        dst_path = os.path.join(project_dir, dst)
        if not os.path.exists(dst_path) and os.path.exists(src_path):
            shutil.copy(src_path, dst_path)
            print(f"Created {dst} from {src}")

    print()
    print("Next steps:")
    print("  1. Put TELEGRAM_BOT_TOKEN into .env")
    print("  2. tgbot-kit config-check")
    print("  3. tgbot-kit init-db && tgbot-kit get-me")


if __name__ == "__main__":
    main()
