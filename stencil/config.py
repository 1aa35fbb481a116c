"""stencil configuration.

Typed engine and CLI settings.  Uses a Pydantic v2 model so values are
validated at construction time and can be serialised to/from JSON or read
from environment variables without boiler-plate.
"""

from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

_TRUTHY = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    """Options shared by the engine and the command-line front end.

    ``indent_multiline`` is read by the renderer; ``encoding`` and
    ``overwrite`` only matter to callers that read and write files.
    """

    indent_multiline: bool = Field(
        default=False,
        description="Indent continuation lines of multi-line values to the placeholder's line",
    )
    encoding: str = Field(default="utf-8", description="Encoding for template and output files")
    overwrite: bool = Field(default=False, description="Replace existing output files")

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"Unknown encoding: {value}") from None
        return value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.  Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build an ``EngineConfig`` from environment variables.

        Recognised variables (all optional):
            STENCIL_INDENT_MULTILINE, STENCIL_ENCODING, STENCIL_OVERWRITE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STENCIL_INDENT_MULTILINE"):
            kwargs["indent_multiline"] = (
                os.environ["STENCIL_INDENT_MULTILINE"].strip().lower() in _TRUTHY
            )
        if os.environ.get("STENCIL_ENCODING"):
            kwargs["encoding"] = os.environ["STENCIL_ENCODING"].strip()
        if os.environ.get("STENCIL_OVERWRITE"):
            kwargs["overwrite"] = os.environ["STENCIL_OVERWRITE"].strip().lower() in _TRUTHY
        return cls(**kwargs)
