import pytest
import sys
from pathlib import Path

# Ensure src/ is in the python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from callbridge.core.context import ExecutionContext
from callbridge.execution.bridge import RuntimeBridge
from callbridge.runtime.script_runtime import ScriptRuntime

SAMPLE_SCRIPT = '''
import math

counter = 0
answer = 42

def add(a, b):
    return a + b

def greet(s):
    return "hello, " + s

def identity():
    return []

def echo(*args):
    return list(args)

def make_adder(n):
    def inner(x):
        return x + n
    return inner

def fail():
    raise ValueError("boom")

def bump():
    global counter
    counter += 1
    return counter

class Point:
    def __init__(self, x=0, y=0):
        self.x = x
        self.y = y
'''


@pytest.fixture
def sample_script():
    return SAMPLE_SCRIPT


@pytest.fixture
def runtime():
    rt = ScriptRuntime()
    rt.load_source(SAMPLE_SCRIPT, filename="sample.py")
    return rt


@pytest.fixture
def context(runtime):
    return ExecutionContext(runtime=runtime)


@pytest.fixture
def bridge(context):
    return RuntimeBridge(context)


@pytest.fixture
def script_file(tmp_path):
    """Writes the sample script to disk and returns its path."""
    path = tmp_path / "funcs.py"
    path.write_text(SAMPLE_SCRIPT)
    return path
