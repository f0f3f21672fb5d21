import shlex
from pathlib import Path
from typing import Any, List, Optional
import yaml
from callbridge.core.values import BaseDynamicValue, dynamic_from_plain


class ArgumentResolver:
    """
    Parses argument text typed at the CLI or REPL into dynamic argument lists.
    """

    @classmethod
    def parse_list(cls, payload: Optional[str]) -> Optional[List[BaseDynamicValue]]:
        """
        Parse a YAML/JSON argument list. A scalar becomes a one-element list,
        blank text an empty list, and None selects the zero-argument form.
        """
        if payload is None:
            return None

        text = payload.strip()
        if not text:
            return []

        data = cls._load(text)
        if not isinstance(data, list):
            data = [data]
        return [cls._to_dynamic(item) for item in data]

    @classmethod
    def parse_file(cls, path: Path) -> List[BaseDynamicValue]:
        try:
            content = path.read_text()
        except OSError as e:
            raise ValueError(f"Could not read argument file '{path}': {e}") from e
        return cls.parse_list(content) or []

    @classmethod
    def parse_tokens(cls, tokens: List[str]) -> List[BaseDynamicValue]:
        """Parse shell-style tokens, one argument per token."""
        return [cls._to_dynamic(cls._load(token)) for token in tokens]

    @classmethod
    def parse_command_tail(cls, tail: Optional[str]) -> Optional[List[BaseDynamicValue]]:
        """
        Parse everything after the function name on a REPL line:
        nothing (zero-argument form), '@file', a '[...]' list, or space separated values.
        """
        if tail is None or not tail.strip():
            return None

        stripped = tail.strip()
        if stripped.startswith("@"):
            return cls.parse_file(Path(stripped[1:].strip()))
        if stripped.startswith("["):
            return cls.parse_list(stripped)

        try:
            tokens = shlex.split(stripped)
        except ValueError as e:
            raise ValueError(f"Could not split arguments: {e}") from e
        return cls.parse_tokens(tokens)

    @classmethod
    def _load(cls, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in arguments: {e}") from e

    @classmethod
    def _to_dynamic(cls, item: Any) -> BaseDynamicValue:
        try:
            return dynamic_from_plain(item)
        except TypeError as e:
            raise ValueError(f"Unsupported argument value {item!r}: {e}") from e
