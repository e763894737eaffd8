from __future__ import annotations

from pathlib import Path
from typing import Tuple


ROOT = Path(__file__).resolve().parent


def load(namespace: str, name: str) -> str:
    """Load a prompt file from the prompts directory.

    Args:
        namespace: Subdirectory name (e.g., 'learning_path')
        name: File name (e.g., 'system_v1.md')

    Returns:
        Prompt text as string

    Raises:
        FileNotFoundError: If prompt file doesn't exist
    """
    p = ROOT / namespace / name
    if not p.exists():
        raise FileNotFoundError(f"Prompt not found: {p}")
    return p.read_text(encoding="utf-8").strip()


def get_learning_path_prompts(version: str = "v1") -> Tuple[str, str]:
    """Get learning path system prompt and user prompt template.

    The user template has ``{profile}`` and ``{content}`` fields.

    Args:
        version: Prompt version

    Returns:
        Tuple of (system_prompt, user_template)
    """
    return load("learning_path", f"system_{version}.md"), load("learning_path", f"user_{version}.md")
