import math
import sys
from decimal import Decimal
from fractions import Fraction

import pytest
from callbridge.core.models import EmbeddedRuntime, NativeKind, RuntimeSettings
from callbridge.runtime.script_runtime import ScriptLoadError, ScriptRuntime


def test_script_runtime_satisfies_embedded_runtime_protocol():
    assert isinstance(ScriptRuntime(), EmbeddedRuntime)


def test_load_source_defines_globals(runtime):
    binding = runtime.lookup("add")

    assert binding.name == "add"
    assert binding.kind is NativeKind.FUNCTION
    assert runtime.invoke_binding(binding, [1, 2]) == 3
    assert "sample.py" in runtime.loaded_scripts


def test_scripts_run_as_private_main_module(runtime):
    assert runtime.lookup("__name__") is not None
    runtime.load_source("module_name = __name__\n")
    assert runtime.lookup("module_name").value == ScriptRuntime.MAIN_MODULE


def test_later_scripts_see_earlier_globals(runtime):
    runtime.load_source("def add_twice(a, b):\n    return add(add(a, b), b)\n")

    binding = runtime.lookup("add_twice")
    assert runtime.invoke_binding(binding, [1, 2]) == 5


def test_load_source_syntax_error():
    rt = ScriptRuntime()

    with pytest.raises(ScriptLoadError) as exc_info:
        rt.load_source("def broken(:\n", filename="broken.py")

    assert "Syntax error" in exc_info.value.message
    assert exc_info.value.file_path == "broken.py"
    assert rt.loaded_scripts == []


def test_load_source_runtime_error():
    rt = ScriptRuntime()

    with pytest.raises(ScriptLoadError, match="ZeroDivisionError"):
        rt.load_source("value = 1 / 0\n")


def test_load_file_with_sibling_import(tmp_path):
    (tmp_path / "cb_helpers_mod.py").write_text("def double(x):\n    return x * 2\n")
    script = tmp_path / "main_script.py"
    script.write_text("from cb_helpers_mod import double\n\ndef quadruple(x):\n    return double(double(x))\n")

    rt = ScriptRuntime()
    try:
        rt.load_file(script)
    finally:
        sys.modules.pop("cb_helpers_mod", None)

    assert rt.invoke_binding(rt.lookup("quadruple"), [3]) == 12
    assert str(tmp_path) not in sys.path
    assert "__file__" not in rt


def test_load_missing_file(tmp_path):
    with pytest.raises(ScriptLoadError, match="Could not read script"):
        ScriptRuntime().load_file(tmp_path / "nope.py")


def test_lookup_unknown_and_invalid_names(runtime):
    assert runtime.lookup("missingFn") is None
    assert runtime.lookup("") is None
    assert runtime.lookup(None) is None
    assert runtime.lookup("math.") is None
    assert runtime.lookup("math.nope") is None


def test_lookup_falls_back_to_builtins(runtime):
    binding = runtime.lookup("len")

    assert binding.kind is NativeKind.FUNCTION
    assert runtime.lookup("__import__") is None


def test_globals_shadow_builtins():
    rt = ScriptRuntime()
    rt.define("len", lambda value: "shadowed")

    binding = rt.lookup("len")
    assert rt.invoke_binding(binding, [[1]]) == "shadowed"


def test_dotted_lookup(runtime):
    binding = runtime.lookup("math.pi")

    assert binding.value == math.pi
    assert binding.kind is NativeKind.FLOAT


def test_define_and_undefine():
    rt = ScriptRuntime(initial_globals={"seed": 1})
    rt.define("helper", lambda: 2)

    assert "seed" in rt
    assert rt.function_names() == ["helper"]

    rt.undefine("helper")
    rt.undefine("never_defined")
    assert rt.function_names() == []


def test_function_names_exclude_classes_modules_and_private(runtime):
    runtime.load_source("def _hidden():\n    return 1\n")

    names = runtime.function_names()
    assert names == ["add", "bump", "echo", "fail", "greet", "identity", "make_adder"]


def test_invoke_binding_distinguishes_no_args_from_empty_list(runtime):
    binding = runtime.lookup("echo")

    assert runtime.invoke_binding(binding, None) == []
    assert runtime.invoke_binding(binding, []) == []
    assert runtime.invoke_binding(binding, (1, 2)) == [1, 2]


@pytest.mark.parametrize(
    "value, kind",
    [
        (None, NativeKind.NULL),
        (False, NativeKind.BOOL),
        (3, NativeKind.INT),
        (2.5, NativeKind.FLOAT),
        (Decimal("1.1"), NativeKind.FLOAT),
        (Fraction(1, 3), NativeKind.FLOAT),
        ("s", NativeKind.STRING),
        ([1], NativeKind.LIST),
        ((1,), NativeKind.LIST),
        (len, NativeKind.FUNCTION),
        (math, NativeKind.OBJECT),
        ({"a": 1}, NativeKind.OBJECT),
        (b"raw", NativeKind.OBJECT),
    ],
)
def test_classify(value, kind):
    assert ScriptRuntime().classify(value) is kind


def test_from_settings_resolves_scripts_against_root(tmp_path):
    (tmp_path / "funcs.py").write_text("def hello():\n    return greeting\n")
    settings = RuntimeSettings(scripts=["funcs.py"], globals={"greeting": "hi"})

    rt = ScriptRuntime.from_settings(settings, root_dir=tmp_path)

    assert rt.invoke_binding(rt.lookup("hello"), None) == "hi"
    assert rt.loaded_scripts == [str(tmp_path / "funcs.py")]


def test_from_settings_missing_script(tmp_path):
    settings = RuntimeSettings(scripts=["missing.py"])

    with pytest.raises(ScriptLoadError):
        ScriptRuntime.from_settings(settings, root_dir=tmp_path)


def test_dotted_lookup_through_raising_attribute(runtime):
    runtime.load_source(
        "class Lazy:\n"
        "    def __getattr__(self, name):\n"
        "        raise KeyError(name)\n"
        "lazy = Lazy()\n"
    )

    assert runtime.lookup("lazy.anything") is None
    assert runtime.lookup("lazy").kind is NativeKind.OBJECT
