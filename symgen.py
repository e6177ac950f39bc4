"""Layout symbol generator for UIKit.

Builds the tag/attribute symbol table used by LayoutTool and the Sublime Text
completions file from a dump of the UIKit runtime class hierarchy.
Produces LayoutTool/Symbols.swift and layout.sublime-completions.

Usage:
    python symgen.py --registry UIKitRegistry.xml
"""

import os
import argparse
import json
import re
import stat
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Protocol

PROJECT_ROOT = Path(__file__).parent
DEFAULT_REGISTRY = PROJECT_ROOT / "UIKitRegistry.xml"
DEFAULT_SYMBOLS_OUT = PROJECT_ROOT / "LayoutTool" / "Symbols.swift"
DEFAULT_COMPLETIONS_OUT = PROJECT_ROOT / "layout.sublime-completions"

ARTIFACT_SYMBOLS: str = "symbols"
ARTIFACT_COMPLETIONS: str = "completions"
ARTIFACT_ORDER: tuple[str, ...] = (ARTIFACT_SYMBOLS, ARTIFACT_COMPLETIONS)


# ===--- SDK version ---=== #


class SdkVersion(NamedTuple):
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


MINIMUM_SDK_VERSION = SdkVersion(11, 0)
_SDK_VERSION_RE = re.compile(r"^(\d+)\.(\d+)$")


def parse_sdk_version(raw: str) -> SdkVersion:
    match = _SDK_VERSION_RE.match(raw.strip())
    if match is None:
        raise ValueError(f"Invalid SDK version: {raw!r} (expected MAJOR.MINOR)")
    return SdkVersion(int(match.group(1)), int(match.group(2)))


# ===--- CLI config contracts ---=== #


@dataclass(frozen=True)
class GenerateConfig:
    registry: Path
    artifacts: tuple[str, ...]
    symbols_out: Path
    completions_out: Path
    minimum_sdk: SdkVersion


@dataclass(frozen=True)
class DiscoveryConfig:
    command: str
    filter_text: str | None
    info_type: str | None
    registry: Path


VALID_ERROR_CODES = {
    "PATH_NOT_FOUND",
    "INVALID_SDK_VERSION",
    "CONFLICT_GENERATE_DISCOVERY",
    "FILTER_WITHOUT_LIST",
}
VALID_PRECONDITION_CODES = {
    "SDK_TOO_OLD",
    "DESTINATION_MISSING",
    "BASE_TYPE_MISSING",
}


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


class PreconditionError(Exception):
    """A hard precondition of the generation run does not hold.

    Raised when the registry was dumped from an SDK older than the newest
    known property surface, when a generic base type is missing from the
    registry, or when a destination file does not exist. Never retried.
    """

    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_PRECONDITION_CODES:
            raise ValueError(f"Unknown precondition code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


def validate_path_exists(
    path: Path | None, flag: str, suggestion: str | None = None
) -> Path:
    if path is None:
        raise ConfigError(
            "PATH_NOT_FOUND",
            f"{flag} is required: no path provided.",
            suggestion or f"Pass the path explicitly: {flag} /path/to/resource",
        )
    if path.exists():
        return path
    raise ConfigError(
        "PATH_NOT_FOUND",
        f"Path for {flag} does not exist: {path}",
        suggestion or "Provide an existing path for this flag.",
    )


def validate_min_sdk(raw: str) -> SdkVersion:
    try:
        return parse_sdk_version(raw)
    except ValueError as err:
        raise ConfigError(
            "INVALID_SDK_VERSION",
            f"Unsupported --min-sdk value: {raw}",
            "Use MAJOR.MINOR, for example --min-sdk 11.0.",
        ) from err


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate LayoutTool symbols and editor completions for UIKit"
    )

    parser.add_argument("--registry", type=Path, default=DEFAULT_REGISTRY)
    parser.add_argument("--symbols-out", type=Path, default=DEFAULT_SYMBOLS_OUT)
    parser.add_argument(
        "--completions-out", type=Path, default=DEFAULT_COMPLETIONS_OUT
    )
    parser.add_argument(
        "--artifact", action="append", choices=ARTIFACT_ORDER, default=None
    )
    parser.add_argument("--min-sdk", type=str, default=None)

    discovery_group = parser.add_mutually_exclusive_group()
    discovery_group.add_argument("--list-types", action="store_true", default=False)
    discovery_group.add_argument("--info", type=str, default=None)

    parser.add_argument("--filter", type=str, default=None)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_argument_parser()
    return parser.parse_args(argv)


def normalize_artifacts(raw_artifacts: list[str] | None) -> tuple[str, ...]:
    if not raw_artifacts:
        return ARTIFACT_ORDER
    selected = set(raw_artifacts)
    return tuple(name for name in ARTIFACT_ORDER if name in selected)


_REGISTRY_HINT = (
    "Export the runtime class hierarchy to an XML dump first, or pass a\n"
    "custom path: --registry /your/path/to/UIKitRegistry.xml"
)


def validate_config(args: argparse.Namespace) -> GenerateConfig | DiscoveryConfig:
    has_generate_input = bool(args.artifact or args.min_sdk)
    has_discovery_command = bool(args.list_types or args.info)

    if args.filter and not args.list_types:
        raise ConfigError(
            "FILTER_WITHOUT_LIST",
            "--filter requires --list-types.",
            "Add --list-types or remove --filter.",
        )

    if has_generate_input and has_discovery_command:
        raise ConfigError(
            "CONFLICT_GENERATE_DISCOVERY",
            "Generate flags cannot be combined with discovery flags.",
            "Choose either generate mode or one discovery command.",
        )

    registry = validate_path_exists(args.registry, "--registry", _REGISTRY_HINT)

    if has_discovery_command:
        return DiscoveryConfig(
            command="list-types" if args.list_types else "info",
            filter_text=args.filter,
            info_type=args.info,
            registry=registry,
        )

    minimum_sdk = (
        validate_min_sdk(args.min_sdk)
        if args.min_sdk is not None
        else MINIMUM_SDK_VERSION
    )
    return GenerateConfig(
        registry=registry,
        artifacts=normalize_artifacts(args.artifact),
        symbols_out=args.symbols_out,
        completions_out=args.completions_out,
        minimum_sdk=minimum_sdk,
    )


def build_config(argv: list[str] | None = None) -> GenerateConfig | DiscoveryConfig:
    return validate_config(parse_args(argv))


# ===--- Data classes ---=== #

AVAILABLE: str = "available"
UNAVAILABLE: str = "unavailable"
VALID_AVAILABILITY = {AVAILABLE, UNAVAILABLE}


@dataclass(frozen=True)
class TypeDescriptor:
    """Semantic type of one layout expression property.

    Equality compares both the type name and the availability flag, so a
    subtype that re-declares an inherited property as unavailable keeps it
    in its own map.

    Attributes:
        name: Type name as rendered in the generated artifacts, e.g. "CGFloat".
        availability: AVAILABLE or UNAVAILABLE. Unavailable properties are
            never emitted.
    """

    name: str
    availability: str = AVAILABLE

    def __str__(self) -> str:
        return self.name

    @property
    def is_available(self) -> bool:
        return self.availability == AVAILABLE


PropertyMap = dict[str, TypeDescriptor]
Catalog = dict[str, PropertyMap]


@dataclass(frozen=True)
class TypeReflection:
    """One type as reported by the registry.

    Attributes:
        name: Runtime class name, e.g. "UIButton".
        base: Superclass name, or None for root classes.
        properties: Full expression property surface, inherited properties
            included.
    """

    name: str
    base: str | None
    properties: PropertyMap


# ===--- Type registry ---=== #


class TypeRegistry(Protocol):
    """Read-only view of the host runtime's loaded classes."""

    sdk_version: SdkVersion
    platform: str

    def type_names(self) -> tuple[str, ...]: ...

    def reflect(self, name: str) -> TypeReflection | None: ...


@dataclass(frozen=True)
class StaticTypeRegistry:
    sdk_version: SdkVersion
    platform: str
    types: dict[str, TypeReflection]

    def type_names(self) -> tuple[str, ...]:
        return tuple(self.types)

    def reflect(self, name: str) -> TypeReflection | None:
        return self.types.get(name)


def _require_attr(elem: ET.Element, attr: str, context: str) -> str:
    value = elem.get(attr)
    if not value:
        raise ValueError(f"{context} is missing required attribute '{attr}'")
    return value


def parse_property(elem: ET.Element, type_name: str) -> tuple[str, TypeDescriptor]:
    context = f"<property> of type {type_name}"
    name = _require_attr(elem, "name", context)
    type_text = _require_attr(elem, "type", f"{context} '{name}'")
    availability = elem.get("availability", AVAILABLE)
    if availability not in VALID_AVAILABILITY:
        raise ValueError(
            f"Property {type_name}.{name} has unknown availability: {availability}"
        )
    return name, TypeDescriptor(type_text, availability)


def parse_type(elem: ET.Element) -> TypeReflection:
    name = _require_attr(elem, "name", "<type>")
    properties: PropertyMap = {}
    for prop_elem in elem.findall("property"):
        prop_name, descriptor = parse_property(prop_elem, name)
        if prop_name in properties:
            raise ValueError(f"Duplicate property {name}.{prop_name} in registry")
        properties[prop_name] = descriptor
    return TypeReflection(name=name, base=elem.get("base") or None, properties=properties)


def parse_type_registry(root: ET.Element) -> StaticTypeRegistry:
    """Build a registry from a parsed registry dump.

    Args:
        root: The <registry> root element.

    Returns:
        StaticTypeRegistry with one TypeReflection per <type> element.

    Raises:
        ValueError: Missing sdk/name/type attributes, an invalid sdk version,
            unknown availability values, or duplicate type/property names.
    """
    sdk_version = parse_sdk_version(_require_attr(root, "sdk", "<registry>"))
    platform = root.get("platform", "iOS")
    types: dict[str, TypeReflection] = {}
    for type_elem in root.findall("type"):
        reflection = parse_type(type_elem)
        if reflection.name in types:
            raise ValueError(f"Duplicate type {reflection.name} in registry")
        types[reflection.name] = reflection
    return StaticTypeRegistry(sdk_version=sdk_version, platform=platform, types=types)


def load_type_registry(path: Path) -> StaticTypeRegistry:
    return parse_type_registry(ET.parse(path).getroot())


# ===--- Catalog rules ---=== #

KIND_VIEW: str = "view"
KIND_CONTROLLER: str = "controller"
KIND_OTHER: str = "other"

# Prefixes, not exact names: subclasses added in later SDK releases match
# without editing these lists.
UIKIT_ALLOW_PREFIXES: tuple[str, ...] = (
    "AVPlayerViewController",
    "AVPictureInPictureViewController",
    "MKOverlay",
    "MKMapView",
    "GLK",
    "SCNView",
    "SKView",
    "UI",
    "WKWebView",
)

UIKIT_DENY_PREFIXES: tuple[str, ...] = (
    "AVPlayerViewControllerContentView",
    "MKOverlayContainer",
    "UIAccessibility",
    "UIActionSheet",
    "UIActivityGroupViewController",
    "UIActivityViewPopoverBackgroundView",
    "UIAlertView",
    "UIApplication",
    "UIAutocorrect",
    "UIAutoRotatingWindow",
    "UIButtonLabel",
    "UICallout",
    "UICheckeredPatternView",
    "UIClassic",
    "UICollectionViewControllerWrapperView",
    "UICollectionViewTable",
    "UICompatibilityInputViewController",
    "UICoverSheetButton",
    "UIDateLabel",
    "UIDatePickerContentView",
    "UIDatePickerWeekMonthDayView",
    "UIDebugging",
    "UIDefaultKeyboardInput",
    "UIDictation",
    "UIDimmingView",
    "UIDocument",
    "UIDOM",
    "UIDropShadowView",
    "UIDynamicCaret",
    "UIFieldEditor",
    "UIGroupTable",
    "UIIndexBar",
    "UIInputS",
    "UIInputWindow",
    "UIInsertControl",
    "UIInterface",
    "UIKB",
    "UIKeyCommand",
    "UIKeyboard",
    "UILayoutContainerView",
    "UIMainPrinterUtilityCell",
    "UIMore",
    "UIMorphingLabel",
    "UIMovieScrubber",
    "UIMultiColumnViewController",
    "UINavigationBarBackIndicatorView",
    "UINavigationButton",
    "UINavigationTransitionView",
    "UINotesTableView",
    "UIPageController",
    "UIPasscodeField",
    "UIPageControllerScrollView",
    "UIPanel",
    "UIPDF",
    "UIPeripheral",
    "UIPickerContentView",
    "UIPickerColumnView",
    "UIPickerTableView",
    "UIPopoverB",
    "UIPrint",
    "UIProgressHUD",
    "UIProgressIndicator",
    "UIRecent",
    "UIReferenceLibraryViewController",
    "UIRemoteKeyboardWindow",
    "UIRemoveControl",
    "UIRoundedRect",
    "UISegment",
    "UISearch",
    "UISelection",
    "UIShadow",
    "UISnapshot",
    "UISplitAndMaskView",
    "UISpringBoard",
    "UISoftware",
    "UIStatusBar",
    "UISwappableImageView",
    "UISwipe",
    "UISwitch",
    "UISystemInputViewController",
    "UITabBar",
    "UITableViewBackground",
    "UITableViewCell",
    "UITableViewCollectionCell",
    "UITableViewCountView",
    "UITableViewIndex",
    "UITableViewLabel",
    "UITableViewWrapperView",
    "UIText",
    "UIToolbar",
    "UITransitionView",
    "UIURLDragPreviewView",
    "UIVideoEditorController",
    "UIViewControllerWrapperView",
    "UIWeb",
    "UIWindow",
    "UIWK",
    "UIZoomViewController",
)

# Re-admitted after filtering: either denied by a wider prefix above or not
# reliably loaded at dump time (SKView).
UIKIT_SUPPLEMENTAL_TYPES: tuple[str, ...] = (
    "SKView",
    "UISearchBar",
    "UISearchController",
    "UISegmentedControl",
    "UISwitch",
    "UITabBar",
    "UITabBarController",
    "UITableViewCell",
    "UITextField",
    "UITextView",
    "UIToolbar",
    "UIWebView",
)


@dataclass(frozen=True)
class CatalogRules:
    """Name filters and base types used to select and dedupe catalog entries.

    Attributes:
        allow_prefixes: A candidate is kept only if it starts with one of these.
        deny_prefixes: A candidate starting with any of these is dropped, even
            when it also matches an allow prefix.
        supplemental: Names always included, bypassing both prefix lists.
        view_base: Generic view base type, e.g. "UIView".
        controller_base: Generic controller base type, e.g. "UIViewController".
    """

    allow_prefixes: tuple[str, ...]
    deny_prefixes: tuple[str, ...]
    supplemental: tuple[str, ...]
    view_base: str
    controller_base: str


UIKIT_RULES = CatalogRules(
    allow_prefixes=UIKIT_ALLOW_PREFIXES,
    deny_prefixes=UIKIT_DENY_PREFIXES,
    supplemental=UIKIT_SUPPLEMENTAL_TYPES,
    view_base="UIView",
    controller_base="UIViewController",
)


# ===--- Type Catalog Builder ---=== #


def require_sdk_version(
    registry: TypeRegistry, minimum: SdkVersion = MINIMUM_SDK_VERSION
) -> None:
    if registry.sdk_version < minimum:
        raise PreconditionError(
            "SDK_TOO_OLD",
            f"Registry was dumped from {registry.platform} SDK "
            f"{registry.sdk_version}; {minimum} or newer is required.",
            "Re-export the registry with the latest SDK so that all "
            "view and controller properties are present.",
        )


def classify_type(registry: TypeRegistry, name: str, rules: CatalogRules) -> str:
    seen: set[str] = set()
    current: str | None = name
    while current is not None:
        if current in seen:
            raise ValueError(f"Cycle in base chain of {name} at {current}")
        seen.add(current)
        if current == rules.view_base:
            return KIND_VIEW
        if current == rules.controller_base:
            return KIND_CONTROLLER
        reflection = registry.reflect(current)
        if reflection is None:
            return KIND_OTHER
        current = reflection.base
    return KIND_OTHER


def is_public_name(name: str) -> bool:
    return not name.startswith("_") and "." not in name


def enumerate_candidates(registry: TypeRegistry, rules: CatalogRules) -> list[str]:
    candidates: list[str] = []
    for name in registry.type_names():
        reflection = registry.reflect(name)
        if reflection is None or reflection.base is None:
            continue
        if not is_public_name(name):
            continue
        if classify_type(registry, name, rules) in (KIND_VIEW, KIND_CONTROLLER):
            candidates.append(name)
    return candidates


def matches_name_filters(name: str, rules: CatalogRules) -> bool:
    if not any(name.startswith(prefix) for prefix in rules.allow_prefixes):
        return False
    return not any(name.startswith(prefix) for prefix in rules.deny_prefixes)


def select_type_names(registry: TypeRegistry, rules: CatalogRules) -> list[str]:
    names = {
        name
        for name in enumerate_candidates(registry, rules)
        if matches_name_filters(name, rules)
    }
    names.update(rules.supplemental)
    return sorted(names)


def subtract_properties(
    properties: PropertyMap, base_properties: PropertyMap
) -> PropertyMap:
    return {
        key: descriptor
        for key, descriptor in properties.items()
        if base_properties.get(key) != descriptor
    }


def extract_properties(
    registry: TypeRegistry,
    name: str,
    rules: CatalogRules,
    view_base: PropertyMap,
    controller_base: PropertyMap,
) -> PropertyMap:
    kind = classify_type(registry, name, rules)
    if kind == KIND_OTHER:
        return {}
    reflection = registry.reflect(name)
    assert reflection is not None
    props = dict(reflection.properties)
    if kind == KIND_CONTROLLER:
        props = subtract_properties(props, controller_base)
    return subtract_properties(props, view_base)


def _base_properties(registry: TypeRegistry, name: str) -> PropertyMap:
    reflection = registry.reflect(name)
    if reflection is None:
        raise PreconditionError(
            "BASE_TYPE_MISSING",
            f"Base type {name} is not present in the {registry.platform} registry.",
            "Make sure the registry dump includes the generic view and "
            "controller base classes.",
        )
    return reflection.properties


def build_catalog(
    registry: TypeRegistry,
    rules: CatalogRules = UIKIT_RULES,
    minimum: SdkVersion = MINIMUM_SDK_VERSION,
) -> Catalog:
    """Select catalog types and compute their deduplicated property maps.

    View types are diffed against the generic view base map. Controller
    types are diffed against the generic controller base map and then the
    view base map. Names that resolve to neither get an empty map.

    Args:
        registry: Source of loaded types.
        rules: Prefix filters, supplemental names and base type names.
        minimum: Oldest SDK whose property surface is accepted.

    Returns:
        Catalog mapping each selected type name to its property map.

    Raises:
        PreconditionError: SDK_TOO_OLD or BASE_TYPE_MISSING.
        ValueError: Cycle in a base chain.
    """
    require_sdk_version(registry, minimum)
    view_base = _base_properties(registry, rules.view_base)
    controller_base = _base_properties(registry, rules.controller_base)

    catalog: Catalog = {}
    for name in select_type_names(registry, rules):
        catalog[name] = extract_properties(
            registry, name, rules, view_base, controller_base
        )
    return catalog


def available_properties(props: PropertyMap) -> list[tuple[str, TypeDescriptor]]:
    """Return (name, descriptor) pairs in sorted order, unavailable ones dropped."""
    return [
        (prop, props[prop]) for prop in sorted(props) if props[prop].is_available
    ]


# ===--- Symbol-table emitter ---=== #

SYMBOL_TABLE_NAME: str = "UIKitSymbols"
GENERATOR_NAME: str = "layout-symbols-gen"


@dataclass(frozen=True)
class ArtifactConfig:
    """Shared generation metadata embedded in the generated file headers.

    Attributes:
        platform: Registry platform label, e.g. "iOS".
        sdk_version: SDK the registry was dumped from.
    """

    platform: str
    sdk_version: SdkVersion


def format_symbols_header(config: ArtifactConfig) -> list[str]:
    """Return the comment and import lines that open Symbols.swift.

    Contains no timestamps, so regenerating against an unchanged registry
    reproduces the file byte for byte.
    """
    return [
        f"//  Generated by {GENERATOR_NAME} from the {config.platform} "
        f"{config.sdk_version} SDK registry.",
        "",
        "import Foundation",
        "",
        f"// NOTE: This is a machine-generated file. Run {GENERATOR_NAME} to regenerate",
        "",
    ]


def format_symbol_entry(name: str, props: PropertyMap) -> list[str]:
    rows = available_properties(props)
    if not rows:
        return [f'    symbols["{name}"] = [:]']
    lines = [f'    symbols["{name}"] = [']
    for prop, descriptor in rows:
        lines.append(f'        "{prop}": "{descriptor}",')
    lines.append("    ]")
    return lines


def format_symbols_source(catalog: Catalog, config: ArtifactConfig) -> str:
    """Render the complete Symbols.swift source.

    Output format:
        let UIKitSymbols: [String: [String: String]] = {
            var symbols = [String: [String: String]]()
            symbols["UIButton"] = [
                "title": "String",
            ]
            symbols["UIView"] = [:]
            return symbols
        }()

    Types and properties are emitted in ascending order. A type whose map is
    empty after dropping unavailable properties still gets an explicit
    empty-map entry.

    Args:
        catalog: Catalog from build_catalog.
        config: Header metadata.

    Returns:
        Swift source with exactly one trailing newline.
    """
    lines = format_symbols_header(config)
    lines.append(f"let {SYMBOL_TABLE_NAME}: [String: [String: String]] = {{")
    lines.append("    var symbols = [String: [String: String]]()")
    for name in sorted(catalog):
        lines.extend(format_symbol_entry(name, catalog[name]))
    lines.append("    return symbols")
    lines.append("}()")
    lines.append("")
    return "\n".join(lines)


# ===--- Completion-list emitter ---=== #

COMPLETIONS_SCOPE: str = "text.xml"


@dataclass(frozen=True)
class Completion:
    """One Sublime Text completion entry.

    Attributes:
        trigger: Text matched while typing. Property triggers carry the type
            after a tab, which Sublime shows as the annotation.
        contents: Snippet inserted on completion; $0 marks the cursor.
    """

    trigger: str
    contents: str


def attribute_completion(name: str, type_label: str) -> Completion:
    return Completion(trigger=f"{name}\t{type_label}", contents=f'{name}="$0"')


def tag_completion(name: str) -> Completion:
    return Completion(trigger=name, contents=f"{name} $0/>")


STATIC_COMPLETIONS: tuple[Completion, ...] = (
    attribute_completion("outlet", "String"),
    attribute_completion("template", "URL"),
    attribute_completion("xml", "URL"),
)


def build_completions(catalog: Catalog) -> tuple[Completion, ...]:
    completions: list[Completion] = []
    seen: set[Completion] = set()

    def _add(completion: Completion) -> None:
        if completion in seen:
            return
        seen.add(completion)
        completions.append(completion)

    for completion in STATIC_COMPLETIONS:
        _add(completion)
    for name in sorted(catalog):
        _add(tag_completion(name))
        for prop, descriptor in available_properties(catalog[name]):
            _add(attribute_completion(prop, str(descriptor)))
    return tuple(completions)


def format_completion_row(completion: Completion) -> str:
    trigger = json.dumps(completion.trigger, ensure_ascii=False)
    contents = json.dumps(completion.contents, ensure_ascii=False)
    return f'{{ "trigger": {trigger}, "contents": {contents} }}'


def format_completions_source(
    completions: tuple[Completion, ...], scope: str = COMPLETIONS_SCOPE
) -> str:
    """Render the layout.sublime-completions JSON document.

    One completion per line, in the given order, so that diffs between
    regenerations stay readable.

    Returns:
        JSON text with exactly one trailing newline.
    """
    rows = [format_completion_row(c) for c in completions]
    lines = [
        "{",
        f'    "scope": {json.dumps(scope)},',
        '    "completions": [',
    ]
    if rows:
        lines.append("        " + ",\n        ".join(rows))
    lines.append("    ]")
    lines.append("}")
    lines.append("")
    return "\n".join(lines)


# ===--- Discovery commands ---=== #


@dataclass(frozen=True)
class TypeSummary:
    """One row of the --list-types table.

    Attributes:
        name: Catalog type name.
        kind: KIND_VIEW, KIND_CONTROLLER or KIND_OTHER.
        base: Superclass name from the registry, or None when the type is
            unknown to the registry or a root class.
        property_count: Properties emitted after dedupe and availability filter.
        unavailable_count: Properties skipped as unavailable.
    """

    name: str
    kind: str
    base: str | None
    property_count: int
    unavailable_count: int


@dataclass(frozen=True)
class TypeDetail:
    """Full --info output for one catalog type.

    Attributes:
        summary: The TypeSummary for this type.
        properties: (name, descriptor) pairs in sorted order, unavailable
            properties included so they can be shown as skipped.
    """

    summary: TypeSummary
    properties: tuple[tuple[str, TypeDescriptor], ...]


def summarize_type(
    registry: TypeRegistry, catalog: Catalog, name: str, rules: CatalogRules
) -> TypeSummary:
    props = catalog[name]
    reflection = registry.reflect(name)
    emitted = len(available_properties(props))
    return TypeSummary(
        name=name,
        kind=classify_type(registry, name, rules),
        base=reflection.base if reflection is not None else None,
        property_count=emitted,
        unavailable_count=len(props) - emitted,
    )


def gather_type_summaries(
    registry: TypeRegistry, catalog: Catalog, rules: CatalogRules = UIKIT_RULES
) -> list[TypeSummary]:
    return [summarize_type(registry, catalog, name, rules) for name in sorted(catalog)]


def filter_types_by_text(
    summaries: list[TypeSummary], filter_text: str
) -> list[TypeSummary]:
    needle = filter_text.lower()
    return [s for s in summaries if needle in s.name.lower()]


def gather_type_detail(
    registry: TypeRegistry,
    catalog: Catalog,
    name: str,
    rules: CatalogRules = UIKIT_RULES,
) -> TypeDetail | None:
    if name not in catalog:
        return None
    props = catalog[name]
    return TypeDetail(
        summary=summarize_type(registry, catalog, name, rules),
        properties=tuple((prop, props[prop]) for prop in sorted(props)),
    )


def format_types_table(summaries: list[TypeSummary], source_label: str) -> str:
    """Return the complete --list-types output as a single string.

    Output format:

        {N} catalog types in {source_label}:

          UIButton          view         12 props
          UITableViewCell   view          9 props  (2 unavailable)
          ...

    Returns:
        Formatted multi-line string including trailing newline.
    """
    lines = [f"{len(summaries)} catalog types in {source_label}:", ""]
    name_width = max((len(s.name) for s in summaries), default=0)
    kind_width = max((len(s.kind) for s in summaries), default=0)
    for s in summaries:
        row = f"  {s.name.ljust(name_width)}  {s.kind.ljust(kind_width)}  {s.property_count:>4} props"
        if s.unavailable_count:
            row += f"  ({s.unavailable_count} unavailable)"
        lines.append(row)
    lines.append("")
    return "\n".join(lines)


def format_type_detail(detail: TypeDetail) -> str:
    """Return the complete --info output for one type.

    Output format:

        UIButton (view)
          Base: UIControl

          Properties (3):
            contentEdgeInsets  UIEdgeInsets
            titleColor         UIColor
            adjustsImage       Bool  (unavailable)

    """
    s = detail.summary
    lines = [f"{s.name} ({s.kind})"]
    lines.append(f"  Base: {s.base if s.base is not None else 'none'}")
    lines.append("")
    lines.append(f"  Properties ({len(detail.properties)}):")
    name_width = max((len(prop) for prop, _ in detail.properties), default=0)
    for prop, descriptor in detail.properties:
        row = f"    {prop.ljust(name_width)}  {descriptor}"
        if not descriptor.is_available:
            row += "  (unavailable)"
        lines.append(row)
    lines.append("")
    return "\n".join(lines)


def source_label_for(registry: TypeRegistry) -> str:
    return f"{registry.platform} SDK {registry.sdk_version}"


def run_discovery(config: DiscoveryConfig, rules: CatalogRules = UIKIT_RULES) -> None:
    """Execute the discovery command specified in config.

    Read-only: loads the registry and builds the catalog but never touches
    the artifact destinations.

    Raises:
        SystemExit(1): When config.command == "info" and the type is not in
            the catalog.
    """
    import sys

    registry = load_type_registry(config.registry)
    catalog = build_catalog(registry, rules, minimum=SdkVersion(0, 0))
    source_label = source_label_for(registry)

    if config.command == "list-types":
        summaries = gather_type_summaries(registry, catalog, rules)
        if config.filter_text is not None:
            summaries = filter_types_by_text(summaries, config.filter_text)
        print(format_types_table(summaries, source_label), end="")

    elif config.command == "info":
        assert config.info_type is not None
        detail = gather_type_detail(registry, catalog, config.info_type, rules)
        if detail is None:
            print(
                f"Error: type '{config.info_type}' is not in the catalog for {source_label}",
                file=sys.stderr,
            )
            raise SystemExit(1)
        print(format_type_detail(detail), end="")


# ===--- Artifact writer ---=== #


@dataclass(frozen=True)
class FileWriteResult:
    """Result of writing a single generated artifact.

    Attributes:
        artifact: ARTIFACT_SYMBOLS or ARTIFACT_COMPLETIONS.
        path: Absolute path of the written file.
        line_count: Number of newline characters in the written content.
        byte_count: Number of bytes written (UTF-8 encoded).
    """

    artifact: str
    path: Path
    line_count: int
    byte_count: int


def require_destination(path: Path) -> Path:
    if path.is_file():
        return path
    raise PreconditionError(
        "DESTINATION_MISSING",
        f"{path} does not exist",
        "The generator only overwrites existing files; check the output path.",
    )


def write_atomic(path: Path, content: str) -> None:
    """Replace path with content so that readers never see a partial file.

    Writes to a temporary file in the destination directory, then renames it
    over the destination. The destination's permission bits are kept.

    Raises:
        OSError: Propagated directly after the temporary file is removed.
    """
    mode = stat.S_IMODE(path.stat().st_mode)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as f:
        tmp_path = Path(f.name)
        try:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        except OSError:
            f.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def write_artifact(artifact: str, path: Path, content: str) -> FileWriteResult:
    """Overwrite one existing artifact file.

    Args:
        artifact: Artifact name, used in the summary report.
        path: Destination; must already exist.
        content: Full file content.

    Returns:
        FileWriteResult with resolved path, line and byte counts.

    Raises:
        PreconditionError: DESTINATION_MISSING. Nothing is created.
        OSError: Propagated from write_atomic.
    """
    path = require_destination(Path(path))
    write_atomic(path, content)
    resolved = path.resolve()
    return FileWriteResult(
        artifact=artifact,
        path=resolved,
        line_count=content.count("\n"),
        byte_count=len(content.encode("utf-8")),
    )


# ===--- Pipeline ---=== #


def artifact_destination(config: GenerateConfig, artifact: str) -> Path:
    if artifact == ARTIFACT_SYMBOLS:
        return config.symbols_out
    if artifact == ARTIFACT_COMPLETIONS:
        return config.completions_out
    raise ValueError(f"Unknown artifact: {artifact}")


def render_artifact(artifact: str, catalog: Catalog, config: ArtifactConfig) -> str:
    if artifact == ARTIFACT_SYMBOLS:
        return format_symbols_source(catalog, config)
    if artifact == ARTIFACT_COMPLETIONS:
        return format_completions_source(build_completions(catalog))
    raise ValueError(f"Unknown artifact: {artifact}")


def generate_artifacts(
    config: GenerateConfig,
    registry: TypeRegistry,
    rules: CatalogRules = UIKIT_RULES,
) -> tuple[Catalog, tuple[FileWriteResult, ...]]:
    """Build the catalog from registry and write every selected artifact.

    All destinations are checked before the catalog is built, so a missing
    destination leaves every artifact untouched.

    Returns:
        The catalog and one FileWriteResult per artifact, in ARTIFACT_ORDER.

    Raises:
        PreconditionError: DESTINATION_MISSING, SDK_TOO_OLD, BASE_TYPE_MISSING.
        OSError: Filesystem write failure.
    """
    for artifact in config.artifacts:
        require_destination(artifact_destination(config, artifact))

    catalog = build_catalog(registry, rules, config.minimum_sdk)
    print(f"  Catalog: {len(catalog)} types")

    artifact_config = ArtifactConfig(
        platform=registry.platform, sdk_version=registry.sdk_version
    )
    results: list[FileWriteResult] = []
    for artifact in config.artifacts:
        content = render_artifact(artifact, catalog, artifact_config)
        results.append(
            write_artifact(artifact, artifact_destination(config, artifact), content)
        )
    return catalog, tuple(results)


def run_generate(
    config: GenerateConfig, rules: CatalogRules = UIKIT_RULES
) -> tuple[FileWriteResult, ...]:
    """Execute the complete generation pipeline for a GenerateConfig.

    Stages: load registry -> check destinations -> build catalog -> render
    -> write -> summary.

    Raises:
        OSError: Registry not readable or filesystem write failure.
        ET.ParseError: Malformed registry XML.
        ValueError: Malformed registry contents.
        PreconditionError: See generate_artifacts.
    """
    print(f"Loading: {config.registry}")
    registry = load_type_registry(config.registry)
    print(
        f"  Registry: {len(registry.type_names())} types, "
        f"{source_label_for(registry)}"
    )

    catalog, results = generate_artifacts(config, registry, rules)
    print(f"  Written: {len(results)} files")

    summary = build_generation_summary(registry, catalog, results, rules)
    print_generation_summary(summary)
    return results


# ===--- Summary report ---=== #


@dataclass(frozen=True)
class CatalogCounts:
    """Per-kind totals for the summary report.

    Invariant: views + controllers + other == types.
    """

    types: int
    views: int
    controllers: int
    other: int
    properties: int
    unavailable: int


@dataclass(frozen=True)
class GenerationSummary:
    source_label: str
    counts: CatalogCounts
    files: tuple[FileWriteResult, ...]


def build_catalog_counts(
    registry: TypeRegistry, catalog: Catalog, rules: CatalogRules = UIKIT_RULES
) -> CatalogCounts:
    kinds = [classify_type(registry, name, rules) for name in catalog]
    emitted = sum(len(available_properties(props)) for props in catalog.values())
    total = sum(len(props) for props in catalog.values())
    counts = CatalogCounts(
        types=len(catalog),
        views=kinds.count(KIND_VIEW),
        controllers=kinds.count(KIND_CONTROLLER),
        other=kinds.count(KIND_OTHER),
        properties=emitted,
        unavailable=total - emitted,
    )
    assert counts.views + counts.controllers + counts.other == counts.types
    return counts


def build_generation_summary(
    registry: TypeRegistry,
    catalog: Catalog,
    files: tuple[FileWriteResult, ...],
    rules: CatalogRules = UIKIT_RULES,
) -> GenerationSummary:
    return GenerationSummary(
        source_label=source_label_for(registry),
        counts=build_catalog_counts(registry, catalog, rules),
        files=files,
    )


def format_generation_summary(summary: GenerationSummary) -> str:
    """Render a GenerationSummary for the console.

    Line counts use thousands separators. Returns a string with exactly one
    trailing newline.
    """
    c = summary.counts
    lines: list[str] = []
    lines.append("Layout symbols generated:")
    lines.append("")
    lines.append(f"  Source:     {summary.source_label}")
    lines.append("")
    lines.append("  Catalog:")
    lines.append(f"    {'Types:':<15}{c.types:>6}")
    lines.append(f"    {'Views:':<15}{c.views:>6}")
    lines.append(f"    {'Controllers:':<15}{c.controllers:>6}")
    lines.append(f"    {'Other:':<15}{c.other:>6}")
    prop_row = f"    {'Properties:':<15}{c.properties:>6}"
    if c.unavailable:
        prop_row += f"  ({c.unavailable} unavailable skipped)"
    lines.append(prop_row)
    lines.append("")
    lines.append("  Files written:")
    for result in summary.files:
        lines.append(f"    {str(result.path):<48} {result.line_count:>6,} lines")
    lines.append("")
    return "\n".join(lines)


def print_generation_summary(summary: GenerationSummary) -> None:
    print(format_generation_summary(summary), end="")


# ===--- Main generation ---=== #


def main():
    try:
        config = build_config()
    except ConfigError as err:
        print(f"Config error [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err

    try:
        if isinstance(config, DiscoveryConfig):
            run_discovery(config)
        else:
            run_generate(config)
    except PreconditionError as err:
        print(f"Precondition failed [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err
    except (OSError, ET.ParseError, ValueError) as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err


if __name__ == "__main__":
    main()
