import pytest

from npm_importmap.errors import ExportResolutionError
from npm_importmap.models import PackageManifest, parse_exports
from npm_importmap.models import ConditionalExports, StringExports, SubpathExports
from npm_importmap.resolution import allowed_conditions, resolve_definition, resolve_exports

BASE = "https://cdn.jsdelivr.net/npm/pkg@1.0.0/"


def _no_listing():
    raise AssertionError("listing must not be fetched when exports is declared")


def _definition(exports, **kwargs):
    manifest = PackageManifest.from_dict({"name": "pkg", "exports": exports})
    return resolve_definition(manifest, BASE, _no_listing, **kwargs)


@pytest.mark.parametrize(
    "raw, expected_type",
    [
        ("./index.js", StringExports),
        ({"import": "./index.mjs", "default": "./index.js"}, ConditionalExports),
        ({".": "./index.js", "./lib/*": "./lib/*.js"}, SubpathExports),
        (None, type(None)),
        ({}, type(None)),
    ],
)
def test_parse_exports_tags_shape_once(raw, expected_type):
    assert isinstance(parse_exports(raw), expected_type)


@pytest.mark.parametrize(
    "exports, expected",
    [
        ("./index.js", {"pkg": BASE + "index.js"}),
        (
            {"import": "./esm/index.mjs", "require": "./cjs/index.js"},
            {"pkg": BASE + "esm/index.mjs"},
        ),
        (
            {"require": "./cjs.js", "module": "./m.js", "default": "./d.js"},
            {"pkg": BASE + "m.js"},
        ),
        ({"types": "./index.d.ts", "default": "./index.js"}, {"pkg": BASE + "index.js"}),
        (
            {
                ".": {"module": "./m.js", "default": "./d.js"},
                "./merge": "./merge.js",
                "./lib/*": "./lib/*.js",
                "./package.json": "./package.json",
                "./internal/*": None,
            },
            {
                "pkg": BASE + "m.js",
                "pkg/merge": BASE + "merge.js",
                "pkg/lib/": BASE + "lib/",
                "pkg/package.json": BASE + "package.json",
            },
        ),
        (
            {"./features/*": {"browser": "./b/*.js", "default": "./d/*.js"}},
            {"pkg/features/": BASE + "d/"},
        ),
        ({"./*": "./*"}, {"pkg/": BASE}),
        ({"./utils/": "./src/utils/"}, {"pkg/utils/": BASE + "src/utils/"}),
    ],
)
def test_resolve_definition_by_exports_shape(exports, expected):
    assert _definition(exports) == expected


def test_browser_condition_selects_browser_branch():
    exports = {".": {"browser": "./browser.js", "node": "./node.js", "default": "./d.js"}}
    assert _definition(exports, browser=True) == {"pkg": BASE + "browser.js"}
    assert _definition(exports) == {"pkg": BASE + "node.js"}


def test_suffix_patterns_are_skipped():
    exports = {".": "./index.js", "./icons/*.svg": "./dist/icons/*.svg"}
    assert _definition(exports) == {"pkg": BASE + "index.js"}


def test_conditional_root_without_match_is_fatal():
    with pytest.raises(ExportResolutionError, match='No known conditions for "."'):
        _definition({"require": "./index.cjs"})


def test_subpath_without_match_is_fatal():
    with pytest.raises(ExportResolutionError):
        _definition({".": "./index.js", "./server": {"require": "./server.cjs"}})


def test_wildcard_without_match_is_fatal():
    with pytest.raises(ExportResolutionError):
        _definition({"./lib/*": {"require": "./lib/*.cjs"}})


def test_resolve_exports_expands_wildcard_request():
    exports = parse_exports({".": "./index.js", "./lib/*": "./dist/lib/*.mjs"})
    assert resolve_exports("pkg", exports, "./lib/merge") == "./dist/lib/merge.mjs"
    assert resolve_exports("pkg", exports, "pkg/lib/merge") == "./dist/lib/merge.mjs"


def test_resolve_exports_prefers_longest_pattern():
    exports = parse_exports({"./*": "./src/*.js", "./lib/*": "./dist/*.js"})
    assert resolve_exports("pkg", exports, "./lib/a") == "./dist/a.js"


def test_resolve_exports_directory_key():
    exports = parse_exports({"./utils/": "./src/utils/"})
    assert resolve_exports("pkg", exports, "./utils/a.js") == "./src/utils/a.js"


def test_resolve_exports_nested_conditions_and_fallback_arrays():
    exports = parse_exports(
        {
            ".": {
                "import": {"browser": "./browser.mjs", "default": "./index.mjs"},
                "default": "./index.cjs",
            },
            "./legacy": [{"require": "./legacy.cjs"}, "./legacy.js"],
        }
    )
    assert resolve_exports("pkg", exports, ".") == "./index.mjs"
    assert resolve_exports("pkg", exports, "./legacy") == "./legacy.js"


def test_resolve_exports_first_allowed_key_commits():
    exports = parse_exports({"import": {"browser": "./b.mjs"}, "default": "./d.js"})
    with pytest.raises(ExportResolutionError):
        resolve_exports("pkg", exports, ".")


def test_resolve_exports_missing_subpath():
    exports = parse_exports("./index.js")
    with pytest.raises(ExportResolutionError, match='Missing "./other" export in "pkg"'):
        resolve_exports("pkg", exports, "./other")


def test_non_directory_pattern_target_is_reported(caplog):
    assert _definition({".": "./index.js", "./x/*": "./x-*.js"}) == {"pkg": BASE + "index.js"}

    assert "Not mapping pkg/x/*" in caplog.text


def test_allowed_conditions_never_include_require():
    assert allowed_conditions(("module",)) == {"default", "import", "module", "node"}
    assert allowed_conditions(browser=True) == {"default", "import", "browser"}
