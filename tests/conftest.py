import argparse
import sys
from collections.abc import Callable
from pathlib import Path

GENERATOR_DIR = Path(__file__).resolve().parent.parent
if str(GENERATOR_DIR) not in sys.path:
    sys.path.insert(0, str(GENERATOR_DIR))

import pytest

import symgen

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixture_registry_path() -> Path:
    return FIXTURES_DIR / "uikit_minimal.xml"


@pytest.fixture
def uikit_registry(fixture_registry_path: Path) -> symgen.StaticTypeRegistry:
    return symgen.load_type_registry(fixture_registry_path)


@pytest.fixture
def existing_paths(tmp_path: Path, fixture_registry_path: Path) -> dict[str, Path]:
    registry = tmp_path / "UIKitRegistry.xml"
    registry.write_text(fixture_registry_path.read_text(encoding="utf-8"), encoding="utf-8")

    symbols_out = tmp_path / "LayoutTool" / "Symbols.swift"
    symbols_out.parent.mkdir(parents=True)
    symbols_out.write_text("// placeholder\n", encoding="utf-8")

    completions_out = tmp_path / "layout.sublime-completions"
    completions_out.write_text("{}\n", encoding="utf-8")

    return {
        "registry": registry,
        "symbols_out": symbols_out,
        "completions_out": completions_out,
    }


@pytest.fixture
def missing_path(tmp_path: Path) -> Path:
    return tmp_path / "missing"


@pytest.fixture
def make_args(existing_paths: dict[str, Path]) -> Callable[..., argparse.Namespace]:
    def _make_args(**overrides: object) -> argparse.Namespace:
        base_args: dict[str, object] = {
            "registry": existing_paths["registry"],
            "symbols_out": existing_paths["symbols_out"],
            "completions_out": existing_paths["completions_out"],
            "artifact": None,
            "min_sdk": None,
            "list_types": False,
            "info": None,
            "filter": None,
        }
        base_args.update(overrides)
        return argparse.Namespace(**base_args)

    return _make_args


@pytest.fixture
def make_registry() -> Callable[..., symgen.StaticTypeRegistry]:
    """Build an in-memory registry from {name: (base, {prop: type})}.

    Property values may be a plain type name (available) or a
    TypeDescriptor.
    """

    def _make_registry(
        types: dict[str, tuple[str | None, dict[str, object]]],
        *,
        sdk_version: symgen.SdkVersion = symgen.SdkVersion(11, 0),
        platform: str = "iOS",
    ) -> symgen.StaticTypeRegistry:
        reflections: dict[str, symgen.TypeReflection] = {}
        for name, (base, props) in types.items():
            properties = {
                prop: value
                if isinstance(value, symgen.TypeDescriptor)
                else symgen.TypeDescriptor(str(value))
                for prop, value in props.items()
            }
            reflections[name] = symgen.TypeReflection(name, base, properties)
        return symgen.StaticTypeRegistry(
            sdk_version=sdk_version, platform=platform, types=reflections
        )

    return _make_registry


@pytest.fixture
def make_rules() -> Callable[..., symgen.CatalogRules]:
    def _make_rules(
        *,
        allow_prefixes: tuple[str, ...] = ("",),
        deny_prefixes: tuple[str, ...] = (),
        supplemental: tuple[str, ...] = (),
        view_base: str = "View",
        controller_base: str = "ViewController",
    ) -> symgen.CatalogRules:
        return symgen.CatalogRules(
            allow_prefixes=allow_prefixes,
            deny_prefixes=deny_prefixes,
            supplemental=supplemental,
            view_base=view_base,
            controller_base=controller_base,
        )

    return _make_rules
