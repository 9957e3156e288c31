"""Tests for option defaults, resolution and validation."""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from pally.errors import ConfigurationError
from pally.models.options import Configuration, Standard, Viewport
from pally.options import (
    ALLOWED_STANDARDS,
    DEFAULT_OPTIONS,
    resolve_options,
    verify_options,
)
from pally.version import __version__


class TestDefaults:
    """Tests for DEFAULT_OPTIONS."""

    def test_default_values(self):
        """Test the documented defaults."""
        assert DEFAULT_OPTIONS.method == "GET"
        assert DEFAULT_OPTIONS.headers == {}
        assert DEFAULT_OPTIONS.post_data is None
        assert DEFAULT_OPTIONS.standard == "WCAG2AA"
        assert DEFAULT_OPTIONS.timeout == 30000
        assert DEFAULT_OPTIONS.wait == 0
        assert DEFAULT_OPTIONS.actions == ()
        assert DEFAULT_OPTIONS.viewport == Viewport(width=1280, height=1024)
        assert DEFAULT_OPTIONS.chrome_launch_config == {"ignore_https_errors": True}
        assert DEFAULT_OPTIONS.user_agent == f"pally/{__version__}"
        assert DEFAULT_OPTIONS.log is logging.getLogger("pally")

    def test_defaults_are_frozen(self):
        """Test that the shared defaults cannot be reassigned."""
        with pytest.raises(PydanticValidationError):
            DEFAULT_OPTIONS.timeout = 1

    def test_allowed_standards(self):
        """Test the allowed standards list."""
        assert ALLOWED_STANDARDS == ("Section508", "WCAG2A", "WCAG2AA", "WCAG2AAA")


class TestResolveOptions:
    """Tests for resolve_options."""

    def test_no_overrides(self):
        """Test that notices and warnings are ignored by default."""
        options = resolve_options()
        assert options.ignore == ("notice", "warning")
        assert options.standard == "WCAG2AA"

    def test_include_notices(self):
        """Test that including notices keeps them out of the ignore list."""
        options = resolve_options({"standard": "WCAG2AAA", "includeNotices": True})
        assert "notice" not in options.ignore
        assert "warning" in options.ignore
        assert options.standard == "WCAG2AAA"

    def test_include_warnings(self):
        """Test that including warnings keeps them out of the ignore list."""
        options = resolve_options({"include_warnings": True})
        assert "warning" not in options.ignore
        assert "notice" in options.ignore

    def test_include_both(self):
        """Test that including both leaves only caller entries."""
        options = resolve_options(
            {"includeNotices": True, "includeWarnings": True, "ignore": ["X"]}
        )
        assert options.ignore == ("x",)

    def test_ignore_lowercased(self):
        """Test that ignore entries are lower-cased."""
        options = resolve_options({"ignore": ["WCAG2AA.Principle1.Guideline1_1", "Error"]})
        assert options.ignore == (
            "wcag2aa.principle1.guideline1_1",
            "error",
            "notice",
            "warning",
        )

    def test_ignore_without_duplicates(self):
        """Test that an explicit notice entry is not added twice."""
        options = resolve_options({"ignore": ["NOTICE"]})
        assert options.ignore == ("notice", "warning")

    def test_viewport_merged_key_by_key(self):
        """Test that nested viewport overrides keep unset keys."""
        options = resolve_options({"viewport": {"width": 320}})
        assert options.viewport == Viewport(width=320, height=1024)

    def test_launch_config_merged_key_by_key(self):
        """Test that launch config overrides keep default keys."""
        options = resolve_options({"chromeLaunchConfig": {"headless": False}})
        assert options.chrome_launch_config == {
            "ignore_https_errors": True,
            "headless": False,
        }

    def test_aliases_and_field_names(self):
        """Test that camelCase and snake_case names are both accepted."""
        options = resolve_options(
            {
                "postData": "a=1",
                "user_agent": "agent",
                "hideElements": ".ad",
                "root_element": "main",
                "screenCapture": "/tmp/shot.png",
            }
        )
        assert options.post_data == "a=1"
        assert options.user_agent == "agent"
        assert options.hide_elements == ".ad"
        assert options.root_element == "main"
        assert options.screen_capture == "/tmp/shot.png"

    def test_unknown_options_ignored(self):
        """Test that unknown option names are dropped."""
        options = resolve_options({"reporter": "json"})
        assert not hasattr(options, "reporter")

    def test_standard_enum_accepted(self):
        """Test that Standard members resolve to their string value."""
        options = resolve_options({"standard": Standard.SECTION508})
        assert options.standard == "Section508"

    def test_actions_stored_as_tuple(self):
        """Test that actions are stored read-only and in order."""
        options = resolve_options({"actions": ["click element #a", "click element #b"]})
        assert options.actions == ("click element #a", "click element #b")

    def test_custom_base(self):
        """Test resolving against a caller-supplied base."""
        base = Configuration(timeout=5000, standard="WCAG2A")
        options = resolve_options({"wait": 100}, base=base)
        assert options.timeout == 5000
        assert options.standard == "WCAG2A"
        assert options.wait == 100

    def test_configuration_overrides(self):
        """Test that a Configuration applies only its explicitly set fields."""
        options = resolve_options(Configuration(method="POST"))
        assert options.method == "POST"
        assert options.timeout == 30000

    def test_defaults_not_mutated(self):
        """Test that resolving never changes the shared defaults."""
        resolve_options({"headers": {"X-Test": "1"}, "viewport": {"width": 1}})
        assert DEFAULT_OPTIONS.headers == {}
        assert DEFAULT_OPTIONS.viewport.width == 1280

    def test_default_mappings_read_only(self):
        """Test that the shared default mappings cannot be changed in place."""
        with pytest.raises(TypeError):
            DEFAULT_OPTIONS.headers["X-Leak"] = "1"
        with pytest.raises(TypeError):
            DEFAULT_OPTIONS.chrome_launch_config["headless"] = False

        options = resolve_options({})
        assert options.headers == {}
        assert options.chrome_launch_config == {"ignore_https_errors": True}

    def test_resolved_mappings_read_only(self):
        """Test that resolved mappings, nested ones included, are read-only."""
        options = resolve_options(
            {
                "headers": {"A": "1"},
                "authCookie": {"name": "session", "value": "abc"},
                "chromeLaunchConfig": {"env": {"LANG": "en"}},
            }
        )

        with pytest.raises(TypeError):
            options.headers["B"] = "2"
        with pytest.raises(TypeError):
            options.auth_cookie["value"] = "stolen"
        with pytest.raises(TypeError):
            options.chrome_launch_config["headless"] = False
        with pytest.raises(TypeError):
            options.chrome_launch_config["env"]["LANG"] = "fr"

    def test_overrides_copied(self):
        """Test that later changes to the caller's mapping do not leak in."""
        headers = {"A": "1"}
        options = resolve_options({"headers": headers})

        headers["A"] = "changed"

        assert options.headers == {"A": "1"}

    def test_invalid_value_type(self):
        """Test that badly typed values raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid options"):
            resolve_options({"timeout": "soon"})

    def test_invalid_standard_resolves(self):
        """Test that resolution does not validate the standard."""
        options = resolve_options({"standard": "BOGUS"})
        assert options.standard == "BOGUS"


class TestVerifyOptions:
    """Tests for verify_options."""

    @pytest.mark.parametrize("standard", ["Section508", "WCAG2A", "WCAG2AA", "WCAG2AAA"])
    def test_allowed_standards_pass(self, standard):
        """Test that every allowed standard is accepted."""
        verify_options(resolve_options({"standard": standard}))

    def test_invalid_standard(self):
        """Test that an unknown standard raises with the allowed values."""
        with pytest.raises(ConfigurationError) as exc_info:
            verify_options(resolve_options({"standard": "BOGUS"}))

        message = str(exc_info.value)
        for standard in ALLOWED_STANDARDS:
            assert standard in message
