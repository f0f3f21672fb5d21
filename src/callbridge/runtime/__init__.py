"""Embedded runtime components."""

from callbridge.runtime.script_runtime import ScriptLoadError, ScriptRuntime

__all__ = [
	"ScriptLoadError",
	"ScriptRuntime",
]
