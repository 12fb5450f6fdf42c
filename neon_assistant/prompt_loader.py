from __future__ import annotations

from pathlib import Path

MASTER_PROMPT_FILE = "neon_master.txt"


def load_prompt(prompt_path: Path) -> str:
    """Purpose: Load a prompt file as UTF-8 text and strip BOM if present.
    Inputs/Outputs: Input is a Path to the prompt file; output is the decoded, trimmed string.
    Side Effects / State: None; pure function reading the filesystem.
    Dependencies: Uses Path.read_text/read_bytes; used when building the Gemini client.
    Failure Modes: UnicodeDecodeError triggers a fallback decode with errors ignored,
        which can drop invalid bytes. A missing file raises FileNotFoundError.
    If Removed: The AI collaborator runs without the Neon persona and reply format.
    Testing Notes: Validate BOM-stripping on a temp file.
    """
    # Read as UTF-8 and fall back to a tolerant decode if needed.
    try:
        text = prompt_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        text = prompt_path.read_bytes().decode("utf-8", errors="ignore")
    return text.lstrip("\ufeff").strip()


def load_master_prompt(prompts_dir: Path) -> str:
    return load_prompt(prompts_dir / MASTER_PROMPT_FILE)
