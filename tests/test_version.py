import pytest

import symgen


def test_parse_sdk_version_returns_typed_version() -> None:
    version = symgen.parse_sdk_version("11.0")

    assert version.major == 11
    assert version.minor == 0
    assert str(version) == "11.0"


def test_parse_sdk_version_strips_whitespace() -> None:
    assert symgen.parse_sdk_version(" 12.4\n") == symgen.SdkVersion(12, 4)


@pytest.mark.parametrize("value", ["11", "11.0.1", "latest", ""])
def test_parse_sdk_version_invalid_raises(value: str) -> None:
    with pytest.raises(ValueError, match="Invalid SDK version"):
        symgen.parse_sdk_version(value)


def test_sdk_version_ordering_is_numeric() -> None:
    v9 = symgen.SdkVersion(9, 3)
    v11 = symgen.SdkVersion(11, 0)

    assert v9 < v11
    assert symgen.SdkVersion(11, 2) < symgen.SdkVersion(11, 10)
    assert not (v11 <= v9)


def test_minimum_sdk_version_is_eleven() -> None:
    assert symgen.MINIMUM_SDK_VERSION == symgen.SdkVersion(11, 0)
