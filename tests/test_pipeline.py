from __future__ import annotations

import json
from pathlib import Path

import pytest

import symgen


def _make_generate_config(
    existing_paths: dict[str, Path],
    *,
    artifacts: tuple[str, ...] = symgen.ARTIFACT_ORDER,
    minimum_sdk: symgen.SdkVersion = symgen.MINIMUM_SDK_VERSION,
    **overrides: Path,
) -> symgen.GenerateConfig:
    paths = {**existing_paths, **overrides}
    return symgen.GenerateConfig(
        registry=paths["registry"],
        artifacts=artifacts,
        symbols_out=paths["symbols_out"],
        completions_out=paths["completions_out"],
        minimum_sdk=minimum_sdk,
    )


def test_run_generate_writes_both_artifacts(existing_paths, capsys) -> None:
    config = _make_generate_config(existing_paths)

    results = symgen.run_generate(config)

    assert [r.artifact for r in results] == list(symgen.ARTIFACT_ORDER)
    symbols = existing_paths["symbols_out"].read_text(encoding="utf-8")
    assert 'symbols["UIButton"] = [' in symbols
    completions = json.loads(existing_paths["completions_out"].read_text(encoding="utf-8"))
    assert completions["scope"] == "text.xml"

    out = capsys.readouterr().out
    assert f"Loading: {existing_paths['registry']}" in out
    assert "Layout symbols generated:" in out


def test_rerun_is_byte_identical(existing_paths, capsys) -> None:
    config = _make_generate_config(existing_paths)

    symgen.run_generate(config)
    first = {
        key: existing_paths[key].read_bytes()
        for key in ("symbols_out", "completions_out")
    }
    symgen.run_generate(config)
    second = {
        key: existing_paths[key].read_bytes()
        for key in ("symbols_out", "completions_out")
    }

    assert first == second


def test_single_artifact_leaves_other_untouched(existing_paths, capsys) -> None:
    config = _make_generate_config(existing_paths, artifacts=(symgen.ARTIFACT_COMPLETIONS,))

    results = symgen.run_generate(config)

    assert [r.artifact for r in results] == [symgen.ARTIFACT_COMPLETIONS]
    assert existing_paths["symbols_out"].read_text(encoding="utf-8") == "// placeholder\n"


def test_missing_symbols_destination_fails_before_any_write(
    existing_paths, missing_path, capsys
) -> None:
    config = _make_generate_config(existing_paths, symbols_out=missing_path)

    with pytest.raises(symgen.PreconditionError) as exc_info:
        symgen.run_generate(config)

    assert exc_info.value.code == "DESTINATION_MISSING"
    assert not missing_path.exists()
    assert existing_paths["completions_out"].read_text(encoding="utf-8") == "{}\n"


def test_missing_unselected_destination_is_ignored(
    existing_paths, missing_path, capsys
) -> None:
    config = _make_generate_config(
        existing_paths,
        artifacts=(symgen.ARTIFACT_COMPLETIONS,),
        symbols_out=missing_path,
    )

    symgen.run_generate(config)

    assert not missing_path.exists()


def test_old_sdk_fails_without_writing(existing_paths, capsys) -> None:
    config = _make_generate_config(existing_paths, minimum_sdk=symgen.SdkVersion(12, 0))

    with pytest.raises(symgen.PreconditionError) as exc_info:
        symgen.run_generate(config)

    assert exc_info.value.code == "SDK_TOO_OLD"
    assert existing_paths["symbols_out"].read_text(encoding="utf-8") == "// placeholder\n"


def test_generate_artifacts_uses_injected_registry_and_rules(
    existing_paths, make_registry, make_rules, capsys
) -> None:
    registry = make_registry(
        {
            "View": ("Root", {"x": "Float", "y": "Float"}),
            "ViewController": ("Root", {}),
            "SpecialView": ("View", {"x": "Float", "y": "Float", "tint": "Color"}),
        }
    )
    config = _make_generate_config(existing_paths)

    catalog, results = symgen.generate_artifacts(config, registry, make_rules())

    assert catalog["SpecialView"] == {"tint": symgen.TypeDescriptor("Color")}
    assert len(results) == 2
    symbols = existing_paths["symbols_out"].read_text(encoding="utf-8")
    assert '        "tint": "Color",' in symbols.splitlines()


def test_unavailable_properties_absent_from_both_artifacts(existing_paths, capsys) -> None:
    symgen.run_generate(_make_generate_config(existing_paths))

    for key in ("symbols_out", "completions_out"):
        text = existing_paths[key].read_text(encoding="utf-8")
        assert "adjustsImageWhenDisabled" not in text


def test_malformed_registry_propagates_value_error(existing_paths, capsys) -> None:
    existing_paths["registry"].write_text("<registry/>", encoding="utf-8")

    with pytest.raises(ValueError, match="sdk"):
        symgen.run_generate(_make_generate_config(existing_paths))


def test_unknown_artifact_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown artifact"):
        symgen.render_artifact(
            "storyboard",
            {},
            symgen.ArtifactConfig(platform="iOS", sdk_version=symgen.SdkVersion(11, 0)),
        )
