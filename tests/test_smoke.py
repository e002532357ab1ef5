"""Smoke tests for the RWL reader package.

These tests verify basic functionality and integration between components.
"""

import sys
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

PROJECT_CONFIG = Path(__file__).parent.parent / "config" / "config.yaml"


def test_package_import():
    """Test that the package can be imported."""
    import rwl_reader

    assert rwl_reader.__version__ == "1.0.0"
    assert callable(rwl_reader.read)


def test_config_loading():
    """Test that configuration can be loaded."""
    from rwl_reader.config import get_settings

    settings = get_settings(str(PROJECT_CONFIG), force_reload=True)

    assert settings.project["name"] == "RWL Reader"
    assert settings.project["version"] == "1.0.0"
    assert settings.reader.round is False
    assert settings.format.fill_value == 9990
    assert settings.format.stop_markers == [999, -9999]
    assert settings.format.sentinel_band == (900, 1100)


def test_config_paths():
    """Test that configuration paths are resolved correctly."""
    from rwl_reader.config import get_settings

    settings = get_settings(str(PROJECT_CONFIG), force_reload=True)

    assert settings.paths.input_dir.is_absolute()
    assert settings.paths.input_dir.name == "input"
    assert settings.paths.output_dir.name == "output"
    assert settings.paths.input_dir.parent.parent == PROJECT_CONFIG.parent.parent.resolve()


def test_packaged_default_config():
    """Test that the configuration shipped with the package loads."""
    from rwl_reader.config.settings import DEFAULT_CONFIG, Settings

    settings = Settings.from_yaml(str(DEFAULT_CONFIG))

    assert settings.format.data_start == 12
    assert settings.format.header_markers == ["1", "2", "3"]
    assert settings.output.matrix_suffix == "_matrix.csv"


def test_missing_config_raises():
    """Test that an explicit missing configuration path is reported."""
    import pytest

    from rwl_reader.config.settings import Settings

    with pytest.raises(FileNotFoundError):
        Settings.from_yaml("does/not/exist.yaml")


def test_reader_flags():
    """Test that legacy string flags map to reader options."""
    from rwl_reader.config import ReaderConfig

    options = ReaderConfig.from_flags(["Round", "zero"])
    assert options.round is True
    assert options.zero_as_missing is True

    options = ReaderConfig.from_flags([])
    assert options.round is False
    assert options.zero_as_missing is False


def test_all_modules_importable():
    """Test that all submodules can be imported."""
    modules = [
        "rwl_reader",
        "rwl_reader.config",
        "rwl_reader.buffer",
        "rwl_reader.cleaners",
        "rwl_reader.boundaries",
        "rwl_reader.transformers",
        "rwl_reader.orchestration",
        "rwl_reader.utils",
    ]

    for module_name in modules:
        module = __import__(module_name)
        assert module is not None


if __name__ == "__main__":
    print("Running smoke tests...")
    print()

    tests = [
        ("Package import", test_package_import),
        ("Config loading", test_config_loading),
        ("Config paths", test_config_paths),
        ("Packaged default config", test_packaged_default_config),
        ("Missing config", test_missing_config_raises),
        ("Reader flags", test_reader_flags),
        ("Module imports", test_all_modules_importable),
    ]

    passed = 0
    failed = 0

    for test_name, test_func in tests:
        try:
            test_func()
            print(f"[PASS] {test_name}")
            passed += 1
        except AssertionError as e:
            print(f"[FAIL] {test_name}: {e}")
            failed += 1
        except Exception as e:
            print(f"[ERROR] {test_name}: {e}")
            failed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed")

    if failed == 0:
        print()
        print("[OK] All smoke tests passed!")
        sys.exit(0)
    else:
        sys.exit(1)
