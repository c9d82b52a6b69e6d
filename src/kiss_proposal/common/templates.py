"""Prompt templating helpers."""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"
DEFAULT_TEMPLATE_PATH = CONFIG_DIR / "prompt_template.txt"
DEFAULT_PROFILES_PATH = CONFIG_DIR / "tone_profiles.yaml"


@dataclass(frozen=True)
class ToneProfile:
    """Sentence bounds and style rules injected into the prompt."""
    name: str
    min_sentences: int
    max_sentences: int
    rules: tuple[str, ...]

    def render_rules(self) -> str:
        return "\n".join(f"   - {rule}" for rule in self.rules)


def load_template(path: str | Path | None = None) -> str:
    """
    Load a prompt template file.

    Args:
        path: Path to template. Defaults to the packaged template.
    """
    return Path(path or DEFAULT_TEMPLATE_PATH).read_text(encoding="utf-8")


def load_tone_profiles(path: str | Path | None = None) -> dict[str, ToneProfile]:
    with open(path or DEFAULT_PROFILES_PATH, "r", encoding="utf-8") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError("Tone profiles file must map profile names to settings")

    profiles = {}
    for name, cfg in raw.items():
        if not isinstance(cfg, dict):
            raise ValueError(f"Tone profile {name!r} must be a mapping")
        profiles[name] = ToneProfile(
            name=name,
            min_sentences=int(cfg.get("min_sentences", 2)),
            max_sentences=int(cfg.get("max_sentences", 4)),
            rules=tuple(str(r) for r in cfg.get("rules", []) or []),
        )
    return profiles


def render_prompt(template: str, user_input: str, profile: ToneProfile | None = None) -> str:
    """
    Render user input (and optionally a tone profile) into the template.

    Args:
        template: Template content containing {{input}}.
        user_input: Input string, embedded verbatim.
        profile: Tone profile filling {{min_sentences}}, {{max_sentences}}
            and {{tone_rules}}.

    Returns:
        Rendered prompt.
    """
    out = template
    if profile is not None:
        out = (
            out.replace("{{min_sentences}}", str(profile.min_sentences))
            .replace("{{max_sentences}}", str(profile.max_sentences))
            .replace("{{tone_rules}}", profile.render_rules())
        )
    # Input last so placeholders typed into a job post are left alone.
    return out.replace("{{input}}", user_input)
