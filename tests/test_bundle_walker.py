"""
Tests for the bundle walk: classification, record building and ordering.
"""

import json

import pytest

from lasso_unpack.analysis.bundle_walker import BundleWalker, unpack_source
from lasso_unpack.analysis.models import CallKind, UnpackStatus
from lasso_unpack.analysis.syntax import parse_source
from lasso_unpack.exceptions import ParseError


def single_record(source, **kwargs):
    result = unpack_source(source, **kwargs)
    assert result.status is UnpackStatus.OK
    assert len(result.records) == 1
    return result.records[0]


class TestScenarios:
    """End-to-end decoding of single registration calls."""

    def test_def_call(self):
        """Test a def call with its factory body."""
        source = 'mod.def("/foo$1.0.0/index", function(require, exports, module){ exports.x = 1; });'
        record = single_record(source)

        assert record.verb is CallKind.DEF
        assert record.path == "/foo$1.0.0/index"
        assert record.package_name == "foo"
        assert record.version == "1.0.0"
        assert record.file_name == "index"
        assert record.content == "{ exports.x = 1; }"
        assert record.size == len(source) - 1

    def test_installed_call(self):
        """Test an installed dependency record."""
        record = single_record('mod.installed("app$1.0.0", "lodash", "4.17.0");')

        assert record.verb is CallKind.INSTALLED
        assert record.path == "app$1.0.0"
        assert record.package_name == "lodash"
        assert record.version == "4.17.0"
        assert record.file_name == ""
        assert record.content == ""

    def test_main_call(self):
        """Test that main decodes its first argument and keeps the second as target."""
        record = single_record('mod.main("/foo$1.0.0", "lib/index");')

        assert record.verb is CallKind.MAIN
        assert record.package_name == "foo"
        assert record.version == "1.0.0"
        assert record.file_name == ""
        assert record.target == "lib/index"

    def test_empty_file(self):
        """Test that an empty file is reported as empty input, not an empty manifest."""
        result = unpack_source("")
        assert result.status is UnpackStatus.EMPTY_INPUT
        assert result.is_empty_input
        assert result.records == []

    def test_comment_only_file_is_empty(self):
        """Test that comments alone are not statements."""
        assert unpack_source("// nothing here\n/* still nothing */\n").is_empty_input

    def test_scoped_def(self):
        """Test a def call for a scoped package."""
        record = single_record('mod.def("/@scope/pkg$2.0.0/lib/a", fn);')

        assert record.package_name == "@scope/pkg"
        assert record.version == "2.0.0"
        assert record.file_name == "lib/a"
        assert record.content == ""

    def test_unrelated_calls_are_ignored(self):
        """Test one recognized call among ten ordinary calls."""
        source = "\n".join(
            [
                "console.log('start');",
                "foo();",
                "a.b.c(1, 2);",
                "list.map(function(x) { return x; });",
                "setTimeout(done, 10);",
                'mod.installed("app$1.0.0", "lodash", "4.17.0");',
                "JSON.parse('{}');",
                "bar(baz());",
                "obj.method().chain();",
                "Math.max(1, 2);",
                "window.alert('end');",
            ]
        )
        result = unpack_source(source)

        assert result.status is UnpackStatus.OK
        assert [record.verb for record in result.records] == [CallKind.INSTALLED]

    def test_no_recognized_calls_is_not_empty_input(self):
        """Test that a non-empty file with nothing recognized yields zero records."""
        result = unpack_source("foo(); bar();")
        assert result.status is UnpackStatus.OK
        assert result.records == []


class TestCallShapes:
    """Tests for the remaining verbs and irregular calls."""

    def test_remap_call(self):
        """Test a remap record."""
        record = single_record('mod.remap("/app$1.0.0/lib/server", "/app$1.0.0/lib/browser");')

        assert record.verb is CallKind.REMAP
        assert record.path == "/app$1.0.0/lib/server"
        assert record.package_name == "app"
        assert record.file_name == "lib/server"
        assert record.target == "/app$1.0.0/lib/browser"

    def test_builtin_call(self):
        """Test a builtin alias for an unversioned name."""
        record = single_record('mod.builtin("events", "/events$1.0.1/events");')

        assert record.verb is CallKind.BUILTIN
        assert record.package_name == "events"
        assert record.version == ""
        assert record.target == "/events$1.0.1/events"

    def test_run_emits_no_record(self):
        """Test that run calls are recognized but produce nothing."""
        assert unpack_source('mod.run("/app$1.0.0/index");').records == []

    def test_loader_bootstrap(self):
        """Test the fixed identity of an immediately invoked loader."""
        source = "(function() { var x = 1; mod.def('/inner$1.0.0/x', function() {}); })();"
        record = single_record(source)

        assert record.verb is CallKind.LOADER_BOOTSTRAP
        assert record.path == "/module.js"
        assert record.package_name == "module.js"
        assert record.file_name == "module.js"
        assert record.version == ""
        assert record.size == len(source) - 1

    def test_loader_bootstrap_call_inside_parentheses(self):
        """Test the (function(){}()) and !function(){}() wrapper styles."""
        for source in ["(function() {}());", "!function() {}();"]:
            assert single_record(source).verb is CallKind.LOADER_BOOTSTRAP

    def test_loader_can_be_suppressed(self):
        """Test include_loader=False."""
        assert unpack_source("(function() {})();", include_loader=False).records == []

    def test_non_literal_path(self):
        """Test that a non-literal path yields an empty identity instead of failing."""
        record = single_record("mod.def(modulePath, function() { return 1; });")

        assert record.path == ""
        assert record.package_name == ""
        assert record.version == ""
        assert record.content == "{ return 1; }"

    def test_missing_arguments(self):
        """Test that calls with too few arguments are absorbed."""
        result = unpack_source("mod.installed(); mod.def();")
        assert [record.verb for record in result.records] == [CallKind.INSTALLED, CallKind.DEF]
        assert all(record.package_name == "" for record in result.records)

    def test_computed_member_is_ignored(self):
        """Test that mod['def'](...) is not a registry call."""
        assert unpack_source('mod["def"]("/a$1.0.0/b", function() {});').records == []

    def test_receiver_filter(self):
        """Test that a configured receiver excludes calls on other objects."""
        source = 'other.def("/a$1.0.0/b", function() {}); $_mod.def("/c$1.0.0/d", function() {});'
        result = unpack_source(source, receiver="$_mod")
        assert [record.package_name for record in result.records] == ["c"]

    def test_content_can_be_omitted(self):
        """Test include_content=False."""
        record = single_record('mod.def("/a$1.0.0/b", function() { x(); });', include_content=False)
        assert record.content == ""
        assert record.package_name == "a"

    def test_nested_registration_found(self):
        """Test registration calls nested inside ordinary code."""
        source = 'if (ready) { wrap(mod.installed("p", "q", "1.0.0")); }'
        record = single_record(source)
        assert record.package_name == "q"

    def test_registration_arguments_not_descended(self):
        """Test that calls inside a module body are not decoded."""
        source = 'mod.def("/a$1.0.0/b", function(require) { other.main("/x$1.0.0", "y"); });'
        result = unpack_source(source)
        assert [record.verb for record in result.records] == [CallKind.DEF]

    def test_single_quotes_and_escapes(self):
        """Test string literal decoding."""
        record = single_record(r"mod.def('/\x66oo$1.0.0/index', function() {});")
        assert record.path == "/foo$1.0.0/index"
        assert record.package_name == "foo"
        assert record.file_name == "index"

    def test_octal_escape(self):
        """Test that legacy octal escapes are decoded."""
        record = single_record(r"mod.def('/f\157o$1.0.0/index', function() {});")
        assert record.path == "/foo$1.0.0/index"
        assert record.package_name == "foo"

    def test_out_of_range_code_point_keeps_escape(self):
        """Test that a code point above U+10FFFF is kept as written."""
        record = single_record(r'mod.def("/foo$1.0.0/\u{110000}", function() {});')
        assert record.package_name == "foo"
        assert record.file_name == r"\u{110000}"

    def test_surrogate_pair_escape(self):
        """Test that a UTF-16 surrogate pair decodes to one character."""
        record = single_record(r'mod.def("/foo$1.0.0/\uD83D\uDE00", function() {});')
        assert record.file_name == "\U0001F600"
        record.to_dict()["fileName"].encode("utf-8")

    def test_lone_surrogate_keeps_raw_text(self):
        """Test that an unpaired surrogate leaves the literal undecoded."""
        record = single_record(r'mod.def("/foo$1.0.0/\uD83D", function() {});')
        assert record.path == r"/foo$1.0.0/\uD83D"
        assert record.file_name == r"\uD83D"

    def test_only_run_emits_nothing(self):
        """Test the emits_record flag of every call kind."""
        assert [kind for kind in CallKind if not kind.emits_record] == [CallKind.RUN]

    def test_sizes_are_byte_lengths(self):
        """Test that size and content use UTF-8 byte offsets."""
        call = 'mod.def("/a$1.0.0/b", function() { var s = "héllo"; })'
        record = single_record("var pre = 'ü';\n" + call + ";")

        assert record.size == len(call.encode("utf-8"))
        assert record.content == '{ var s = "héllo"; }'


class TestErrors:
    """Tests for parse failures."""

    @pytest.mark.parametrize("source", ["mod.def(", "function (", "var = ;"])
    def test_invalid_source_raises_parse_error(self, source):
        """Test that invalid JavaScript raises ParseError with a position."""
        with pytest.raises(ParseError) as exc_info:
            unpack_source(source)

        assert exc_info.value.line >= 1
        assert exc_info.value.column >= 1
        assert exc_info.value.message

    def test_parse_error_position_line(self):
        """Test that the reported line points at the broken statement."""
        with pytest.raises(ParseError) as exc_info:
            unpack_source('mod.run("/a$1.0.0/b");\nmod.def("/x$1.0.0/y", function( {;\n')
        assert exc_info.value.line == 2


class TestSampleBundle:
    """Decoding a complete bundle."""

    def test_records_in_source_order(self, sample_bundle_source):
        """Test the full manifest of the sample bundle."""
        records = unpack_source(sample_bundle_source).records

        assert [(record.verb.value, record.package_name, record.version, record.file_name) for record in records] == [
            ("functionExpression", "module.js", "", "module.js"),
            ("installed", "lodash", "4.17.21", ""),
            ("main", "lodash", "4.17.21", ""),
            ("def", "lodash", "4.17.21", "lodash"),
            ("installed", "@ebay/ui-core", "2.3.0", ""),
            ("def", "@ebay/ui-core", "2.3.0", "dist/index"),
            ("remap", "app", "1.0.0", "lib/server"),
            ("builtin", "events", "", ""),
            ("def", "events", "1.0.1", "events"),
            ("def", "app", "1.0.0", "index"),
        ]

    def test_content_is_verbatim_slice(self, sample_bundle_source):
        """Test that def content is an untouched slice of the source."""
        parsed = parse_source(sample_bundle_source)
        records = list(BundleWalker().iter_records(parsed))
        scoped = next(record for record in records if record.package_name == "@ebay/ui-core" and record.verb is CallKind.DEF)

        assert scoped.content.startswith("{\n    // Exported helpers\n")
        assert scoped.content.endswith("exports.noop = _.identity;\n}")
        assert scoped.content in sample_bundle_source

    def test_offsets_are_non_decreasing(self, sample_bundle_source):
        """Test that sizes are positive and records follow source positions."""
        records = unpack_source(sample_bundle_source).records
        assert all(record.size > 0 for record in records)

        position = 0
        for record in records[1:]:
            position = sample_bundle_source.find(record.path, position)
            assert position >= 0, record.path

    def test_sizes_match_call_spans(self, sample_bundle_source):
        """Test that def and installed sizes equal the byte length of their call expressions."""
        records = unpack_source(sample_bundle_source).records
        lodash_def = next(r for r in records if r.verb is CallKind.DEF and r.package_name == "lodash")
        lodash_installed = next(r for r in records if r.verb is CallKind.INSTALLED and r.package_name == "lodash")

        def_start = sample_bundle_source.index('$_mod.def("/lodash$4.17.21/lodash"')
        def_end = sample_bundle_source.index("})", def_start) + len("})")
        installed_call = '$_mod.installed("app$1.0.0", "lodash", "4.17.21")'

        assert lodash_def.size == len(sample_bundle_source[def_start:def_end].encode("utf-8"))
        assert lodash_installed.size == len(installed_call.encode("utf-8"))

    def test_walk_is_idempotent(self, sample_bundle_source):
        """Test that two walks over identical input serialize identically."""
        first = json.dumps(unpack_source(sample_bundle_source).to_list(), indent=2)
        second = json.dumps(unpack_source(sample_bundle_source).to_list(), indent=2)
        assert first == second
