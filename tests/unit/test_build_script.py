"""
Unit tests for the Lambda packaging script.
"""

import importlib.util
import zipfile
from pathlib import Path

import pytest

BUILD_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "build.py"


@pytest.fixture
def build_module():
    """Load scripts/build.py without putting scripts/ on sys.path."""
    spec = importlib.util.spec_from_file_location("order_query_build", BUILD_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def project_tree(tmp_path):
    """Minimal project layout with two functions and the shared package."""
    src = tmp_path / "src"
    for function in ("orders", "order_detail"):
        (src / function).mkdir(parents=True)
        (src / function / "lambda_function.py").write_text("def lambda_handler(event, context):\n    pass\n")
    (src / "service" / "logic").mkdir(parents=True)
    (src / "service" / "__init__.py").write_text("")
    (src / "service" / "logic" / "order_service.py").write_text("X = 1\n")
    (src / "service" / "__pycache__").mkdir()
    (src / "service" / "__pycache__" / "junk.pyc").write_bytes(b"\x00")
    return tmp_path


def test_only_function_directories_are_built(build_module, project_tree):
    """Test that the shared package is not treated as a function."""
    names = [d.name for d in build_module.function_dirs(project_tree / "src")]
    assert names == ["order_detail", "orders"]


def test_archives_bundle_shared_package(build_module, project_tree):
    """Test that every archive contains the handler and the service package."""
    archives = build_module.main(project_tree)

    assert sorted(a.name for a in archives) == ["order_detail.zip", "orders.zip"]
    with zipfile.ZipFile(project_tree / "build" / "orders.zip") as zipf:
        names = set(zipf.namelist())

    assert "lambda_function.py" in names
    assert "service/__init__.py" in names
    assert "service/logic/order_service.py" in names
    assert not any("__pycache__" in name for name in names)
    assert not (project_tree / "build" / "temp_orders").exists()
