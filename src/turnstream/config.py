"""Configuration shared by the response conversion strategies."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

DEFAULT_ERROR_MESSAGE = "Unknown error from LLM provider"
ENV_PREFIX = "TURNSTREAM_"


@dataclass(slots=True)
class NormalizerConfig:
    """Tunables for canonical response assembly.

    Attributes
    ----------
    chars_per_token:
        Divisor used by the fallback usage estimate when the provider does not
        report token usage for a stream. The estimate is
        ``ceil(len(text) / chars_per_token)`` output tokens.
    default_error_message:
        Message reported when an error chunk carries no usable description.
    response_role:
        Role assigned to the content of every canonical candidate.
    """

    chars_per_token: int = 4
    default_error_message: str = DEFAULT_ERROR_MESSAGE
    response_role: str = "model"

    def __post_init__(self) -> None:
        if isinstance(self.chars_per_token, bool) or not isinstance(self.chars_per_token, int):
            msg = "chars_per_token must be an integer"
            raise ValueError(msg)
        if self.chars_per_token < 1:
            msg = "chars_per_token must be at least 1"
            raise ValueError(msg)
        if not isinstance(self.response_role, str) or not self.response_role.strip():
            msg = "response_role must be a non-empty string"
            raise ValueError(msg)
        if not isinstance(self.default_error_message, str) or not self.default_error_message:
            msg = "default_error_message must be a non-empty string"
            raise ValueError(msg)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "NormalizerConfig":
        """Build a config from a mapping keyed by field name.

        Unknown keys are rejected so that typos surface early.
        """

        known = {field.name for field in fields(cls)}
        unknown = set(values) - known
        if unknown:
            joined = ", ".join(sorted(unknown))
            msg = f"unknown configuration keys: {joined}"
            raise ValueError(msg)
        return cls(**dict(values))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "NormalizerConfig":
        """Build a config from ``TURNSTREAM_*`` environment variables."""

        source = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        raw_chars = source.get(f"{ENV_PREFIX}CHARS_PER_TOKEN")
        if raw_chars is not None and raw_chars.strip():
            try:
                values["chars_per_token"] = int(raw_chars.strip())
            except ValueError as exc:
                msg = f"{ENV_PREFIX}CHARS_PER_TOKEN must be an integer"
                raise ValueError(msg) from exc

        error_message = source.get(f"{ENV_PREFIX}DEFAULT_ERROR_MESSAGE")
        if error_message:
            values["default_error_message"] = error_message

        role = source.get(f"{ENV_PREFIX}RESPONSE_ROLE")
        if role:
            values["response_role"] = role.strip()

        return cls(**values)

    def as_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain dictionary."""

        return asdict(self)
