"""Instance directory loader — all path and setting lookups go through here."""

import json
import os
from pathlib import Path

from .chatdb import DEFAULT_CHAT_DB

_instance_dir = None  # Set once at startup

DEFAULT_SHOW_LIMIT = 20


def init(instance_dir: Path):
    """Called by CLI to set the active instance directory."""
    global _instance_dir
    _instance_dir = Path(instance_dir).resolve()


def get_instance_dir() -> Path:
    if _instance_dir is None:
        raise RuntimeError("config.init() must be called before accessing instance dir")
    return _instance_dir


def get_config_path() -> Path:
    return get_instance_dir() / "config.json"


def load_config() -> dict:
    path = get_config_path()
    if not path.exists():
        return {}
    return json.loads(path.read_text())


def save_config(cfg: dict):
    get_instance_dir().mkdir(parents=True, exist_ok=True)
    get_config_path().write_text(json.dumps(cfg, indent=2) + "\n")


def get_contact() -> str:
    contact = load_config().get("contact", "").strip()
    if not contact:
        raise ValueError(
            f"No contact set in {get_config_path()}. "
            "Run 'imsg-recover init <dir>' or pass --contact."
        )
    return contact


def get_chat_db_path() -> Path:
    cfg = load_config()
    if cfg.get("chat_db"):
        return Path(os.path.expanduser(cfg["chat_db"]))
    return DEFAULT_CHAT_DB


def get_output_path() -> Path:
    cfg = load_config()
    if "output" in cfg:
        return Path(os.path.expanduser(cfg["output"]))
    return get_instance_dir() / "conversation.md"


def get_show_limit() -> int:
    return int(load_config().get("show_limit", DEFAULT_SHOW_LIMIT))


def get_filter_reactions() -> bool:
    return bool(load_config().get("filter_reactions", True))
