import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, Iterable
from callbridge.core.context import ExecutionContext

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]+))?\}")

ALLOWED_SECTIONS = {"callbridge", "bridge", "runtime"}

def interpolate_env_vars(content: str) -> str:
    """Replace ${VAR} or ${VAR:default} with environment variables."""
    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, content)

def load_config(path: Path) -> Dict[str, Any]:
    """
    Load callbridge.yaml with environment variable interpolation.

    Keeps only the known sections: callbridge, bridge, runtime.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
        interpolated_content = interpolate_env_vars(content)
        full_config = yaml.safe_load(interpolated_content) or {}
    except (OSError, yaml.YAMLError):
        return {}

    if not isinstance(full_config, dict):
        return {}

    return {k: v for k, v in full_config.items() if k in ALLOWED_SECTIONS}

def find_config(root_dir: Path) -> Path:
    """Prefer callbridge.yaml in root_dir, then the current directory."""
    config_path = root_dir / "callbridge.yaml"
    if not config_path.exists():
        config_path = Path.cwd() / "callbridge.yaml"
    return config_path

def load_context(root_dir: Path, scripts: Iterable[Path] = ()) -> ExecutionContext:
    """
    Build an ExecutionContext from the config found for root_dir, then load any
    extra scripts into its runtime. Raises ScriptLoadError.
    """
    config_data = load_config(find_config(root_dir))
    context = ExecutionContext.from_config(config_data, root_dir=root_dir)
    for script in scripts:
        context.runtime.load_file(script)
    return context
