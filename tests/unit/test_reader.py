"""Tests for the PropertiesReader binding engine."""

import os
from enum import Enum
from typing import Annotated, Any
from unittest.mock import Mock, patch

import pytest
from loguru import logger

from propbind.exceptions import (
    ConfigurationError,
    ErrorCode,
    FieldWriteFailureError,
    InvalidParserReferenceError,
    NoResourceLocatorError,
    ParseFailureError,
    ResourceNotFoundError,
    UnknownEnumValueError,
    UnresolvedPlaceholderError,
)
from propbind.metadata import PropertyKey
from propbind.parsers import BrowserType, ParserRegistry
from propbind.reader import ConfigurationReader, PropertiesReader
from propbind.resources import FileSystemResourceLoader
from propbind.utils.placeholders import PlaceholderResolver, set_property
from tests.records import (
    ClassLevelRecord,
    Color,
    ColorRecord,
    EnvironmentSettings,
    ListRecord,
    LockedRecord,
    NoArgsParserRecord,
    SampleConfiguration,
    SlottedRecord,
    UntaggedRecord,
    UpperCaseRecord,
    WrongTypeRecord,
)


pytestmark = pytest.mark.fast


class DictLoader:
    """In-memory resource loader keyed by path."""

    def __init__(self, resources: dict[str, str]):
        self.resources = resources
        self.requested: list[str] = []

    def read_text(self, path: str) -> str:
        self.requested.append(path)
        if path not in self.resources:
            raise ResourceNotFoundError(path)
        return self.resources[path]


def make_reader(text: str, path: str = "app.properties", **kwargs: Any) -> PropertiesReader:
    return PropertiesReader(path, loader=DictLoader({path: text}), **kwargs)


class TestResourceLocator:
    def test_type_level_path(self):
        loader = DictLoader({"test-configurations.properties": "string.property=x"})
        record = SampleConfiguration()
        PropertiesReader(loader=loader).bind(record)

        assert loader.requested == ["test-configurations.properties"]
        assert record.string_property == "x"

    def test_explicit_path_wins(self):
        loader = DictLoader({"override.properties": "string.property=override"})
        record = SampleConfiguration()
        PropertiesReader("override.properties", loader=loader).bind(record)

        assert loader.requested == ["override.properties"]
        assert record.string_property == "override"

    def test_no_locator(self):
        loader = DictLoader({})
        with pytest.raises(NoResourceLocatorError) as exc_info:
            PropertiesReader(loader=loader).bind(UntaggedRecord())

        assert exc_info.value.record_type is UntaggedRecord
        assert loader.requested == []

    def test_placeholder_resolved_from_process_property(self):
        loader = DictLoader({"qa-configurations.properties": "base.url=https://qa"})
        set_property("PROPBIND_TEST_ENV", "qa")
        settings = EnvironmentSettings()
        PropertiesReader(loader=loader).bind(settings)

        assert settings.base_url == "https://qa"

    def test_placeholder_resolved_from_environment(self):
        loader = DictLoader({"prod-configurations.properties": "retries=5"})
        settings = EnvironmentSettings()
        with patch.dict(os.environ, {"PROPBIND_TEST_ENV": "prod"}):
            PropertiesReader(loader=loader).bind(settings)

        assert settings.retries == 5

    def test_unresolved_placeholder_fails_before_load(self):
        loader = DictLoader({})
        resolver = PlaceholderResolver([{}])
        settings = EnvironmentSettings(base_url="before")

        with pytest.raises(UnresolvedPlaceholderError) as exc_info:
            PropertiesReader(loader=loader, resolver=resolver).bind(settings)

        assert exc_info.value.key == "PROPBIND_TEST_ENV"
        assert loader.requested == []
        assert settings.base_url == "before"

    def test_missing_resource(self):
        with pytest.raises(ResourceNotFoundError):
            PropertiesReader("absent.properties", loader=DictLoader({})).bind(SampleConfiguration())

    def test_locator_not_cached_between_calls(self):
        loader = DictLoader(
            {
                "qa-configurations.properties": "base.url=qa",
                "prod-configurations.properties": "base.url=prod",
            }
        )
        reader = PropertiesReader(loader=loader)

        set_property("PROPBIND_TEST_ENV", "qa")
        first = EnvironmentSettings()
        reader.bind(first)

        set_property("PROPBIND_TEST_ENV", "prod")
        second = EnvironmentSettings()
        reader.bind(second)

        assert (first.base_url, second.base_url) == ("qa", "prod")
        assert reader.file_path is None

    def test_default_loader_uses_library_config(self, resource_dir, write_resource):
        write_resource("app.properties", "string.property=from-config")
        record = SampleConfiguration()
        with patch.dict(os.environ, {"PROPBIND__RESOURCES__SEARCH_PATHS": str(resource_dir)}):
            PropertiesReader("app.properties").bind(record)

        assert record.string_property == "from-config"


class TestValueResolution:
    def test_default_used_when_key_missing(self):
        settings = EnvironmentSettings()
        make_reader("").bind(settings)

        assert settings.retries == 3
        assert settings.browser is BrowserType.CHROME

    def test_source_value_beats_default(self):
        settings = EnvironmentSettings()
        make_reader("retries=7\nbrowser.name=firefox").bind(settings)

        assert settings.retries == 7
        assert settings.browser is BrowserType.FIREFOX

    def test_missing_key_without_default_leaves_field(self):
        record = SampleConfiguration()
        record.int_property = 99
        make_reader("string.property=x").bind(record)

        assert record.int_property == 99

    @pytest.mark.parametrize("text", ["int.property=", "int.property=   ", "int.property=\\t"])
    def test_blank_value_leaves_field(self, text):
        record = SampleConfiguration()
        record.int_property = 99
        make_reader(text).bind(record)

        assert record.int_property == 99

    def test_blank_value_does_not_fall_back_to_default(self):
        settings = EnvironmentSettings()
        make_reader("retries=   ").bind(settings)

        assert settings.retries == 0

    def test_fresh_source_per_call(self):
        loader = DictLoader({"app.properties": "string.property=one"})
        reader = PropertiesReader("app.properties", loader=loader)
        record = SampleConfiguration()

        reader.bind(record)
        loader.resources["app.properties"] = "string.property=two"
        reader.bind(record)

        assert record.string_property == "two"
        assert len(loader.requested) == 2


class TestParserSelection:
    def test_builtin_types(self):
        record = SampleConfiguration()
        make_reader("int.property=1\nboolean.property=TRUE\ndouble.property=2.5").bind(record)

        assert record.int_property == 1
        assert record.boolean_property is True
        assert record.double_property == 2.5

    def test_custom_parser_beats_builtin(self):
        record = UpperCaseRecord()
        make_reader("name=alice").bind(record)
        assert record.name == "ALICE"

    def test_enum_without_parser(self):
        record = ColorRecord()
        make_reader("color=Dark_Blue").bind(record)
        assert record.color is Color.DARK_BLUE

    def test_enum_matches_value(self):
        record = ColorRecord()
        make_reader("color=navy").bind(record)
        assert record.color is Color.DARK_BLUE

    def test_unknown_enum_value_propagates(self):
        record = ColorRecord()
        with pytest.raises(UnknownEnumValueError) as exc_info:
            make_reader("color=green").bind(record)

        assert exc_info.value.value == "green"
        assert record.color is None

    def test_unknown_browser(self):
        settings = EnvironmentSettings()
        with pytest.raises(UnknownEnumValueError) as exc_info:
            make_reader("browser.name=edge").bind(settings)
        assert exc_info.value.value == "edge"

    def test_string_passthrough(self):
        record = SampleConfiguration()
        make_reader("string.property=\\ \\ spaced  ").bind(record)
        assert record.string_property == "  spaced  "

    def test_custom_registry(self):
        class Reverse:
            def parse(self, value: str) -> str:
                return value[::-1]

        registry = ParserRegistry({str: Reverse()})
        record = ClassLevelRecord()
        make_reader("string.property=abc", registry=registry).bind(record)
        assert record.value == "cba"

    def test_unannotated_type_accepts_raw_string(self):
        class AnyRecord:
            value: Annotated[Any, PropertyKey("value")] = None

        record = AnyRecord()
        make_reader("value=raw").bind(record)
        assert record.value == "raw"


class TestFailures:
    def test_parse_failure_wraps_cause(self):
        record = SampleConfiguration()
        with pytest.raises(ParseFailureError) as exc_info:
            make_reader("int.property=abc").bind(record)

        exc = exc_info.value
        assert exc.key == "int.property"
        assert exc.target_type is int
        assert isinstance(exc.cause, ValueError)

    def test_prior_writes_retained(self):
        record = SampleConfiguration()
        text = "string.property=written\nint.property=not-a-number\ndouble.property=9.5"

        with pytest.raises(ParseFailureError):
            make_reader(text).bind(record)

        assert record.string_property == "written"
        assert record.double_property == 0.0

    def test_invalid_parser_reference(self):
        with pytest.raises(InvalidParserReferenceError):
            make_reader("value=x").bind(NoArgsParserRecord())

    @pytest.mark.parametrize("text", ["", "value=   "])
    def test_invalid_parser_reported_when_value_blank(self, text):
        record = NoArgsParserRecord()
        with pytest.raises(InvalidParserReferenceError) as exc_info:
            make_reader(text).bind(record)

        assert isinstance(exc_info.value.cause, TypeError)
        assert record.value == ""

    def test_unresolvable_annotation_is_typed(self):
        class Mode(Enum):
            FAST = "fast"

        class LocalRecord:
            mode: "Annotated[Mode | None, PropertyKey('mode')]" = None

        with pytest.raises(ConfigurationError) as exc_info:
            make_reader("mode=fast").bind(LocalRecord())
        assert exc_info.value.component == "metadata"

    def test_failure_logged_with_error_code(self):
        messages: list[str] = []
        sink_id = logger.add(messages.append, level="ERROR", format="{message}")
        try:
            with pytest.raises(ParseFailureError):
                make_reader("int.property=abc").bind(SampleConfiguration())
        finally:
            logger.remove(sink_id)

        assert len(messages) == 1
        assert "SampleConfiguration" in messages[0]
        assert f"code={ErrorCode.PARSE_FAILED.value}" in messages[0]

    def test_custom_parser_wrong_type(self):
        record = WrongTypeRecord()
        with pytest.raises(FieldWriteFailureError) as exc_info:
            make_reader("count=3").bind(record)

        assert exc_info.value.field_name == "count"
        assert isinstance(exc_info.value.cause, TypeError)
        assert record.count == 0

    def test_passthrough_into_incompatible_field(self):
        with pytest.raises(FieldWriteFailureError):
            make_reader("items=a,b").bind(ListRecord())

    def test_write_bypasses_setattr_hook(self):
        record = LockedRecord()
        make_reader("token=secret").bind(record)
        assert record.token == "secret"

    def test_unwritable_field(self):
        with pytest.raises(FieldWriteFailureError) as exc_info:
            make_reader("value=x").bind(SlottedRecord())
        assert isinstance(exc_info.value.cause, AttributeError)

    def test_loader_errors_propagate(self):
        loader = Mock()
        loader.read_text.side_effect = ResourceNotFoundError("app.properties")
        with pytest.raises(ResourceNotFoundError):
            PropertiesReader("app.properties", loader=loader).bind(SampleConfiguration())


class TestConfigurationReaderProtocol:
    def test_load_bean_alias(self):
        reader: ConfigurationReader[SampleConfiguration] = make_reader("int.property=4")
        record = SampleConfiguration()
        reader.load_bean(record)
        assert record.int_property == 4

    def test_load_bean_with_filesystem_loader(self, fixtures_dir):
        reader = PropertiesReader(loader=FileSystemResourceLoader([fixtures_dir]))
        record = SampleConfiguration()
        assert reader.load_bean(record) is None
        assert record.boolean_wrapper_property is False
