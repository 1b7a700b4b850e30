"""Tests for compspec.generator.flag_mapper."""

from __future__ import annotations

from compspec.generator.flag_mapper import flag_key, map_flags
from compspec.models import Command, FlagMeta


class TestFlagKey:
    def test_prefixes_double_dash(self) -> None:
        assert flag_key(FlagMeta(name="json")) == "--json"

    def test_ignores_char(self) -> None:
        assert flag_key(FlagMeta(name="target-org", char="o")) == "--target-org"


class TestMapFlags:
    """Flag mapping to ``--name -> description``."""

    def test_single_flag(self) -> None:
        flags = {"json": FlagMeta(name="json", description="output json")}
        assert map_flags(flags) == {"--json": "output json"}

    def test_no_flags(self) -> None:
        assert map_flags({}) == {}

    def test_missing_description_is_empty_string(self) -> None:
        assert map_flags({"wait": FlagMeta(name="wait")}) == {"--wait": ""}

    def test_order_preserved(self) -> None:
        flags = {
            "zeta": FlagMeta(name="zeta", description="z"),
            "alpha": FlagMeta(name="alpha", description="a"),
            "mid": FlagMeta(name="mid", description="m"),
        }
        assert list(map_flags(flags)) == ["--zeta", "--alpha", "--mid"]

    def test_uses_flag_name_not_key(self) -> None:
        flags = {"key": FlagMeta(name="real-name", description="d")}
        assert map_flags(flags) == {"--real-name": "d"}

    def test_description_not_sanitized(self) -> None:
        flags = {"f": FlagMeta(name="f", description='a "quoted" [thing]')}
        assert map_flags(flags) == {"--f": 'a "quoted" [thing]'}

    def test_returns_new_mapping(self) -> None:
        flags = {"json": FlagMeta(name="json", description="x")}
        mapped = map_flags(flags)
        mapped["--other"] = "y"
        assert "--other" not in map_flags(flags)


class TestCommandFlagNormalisation:
    """Flags given in document form normalise to FlagMeta."""

    def test_mapping_without_name_takes_key(self) -> None:
        cmd = Command.model_validate(
            {"id": "x", "flags": {"json": {"description": "output json"}}}
        )
        assert cmd.flags["json"].name == "json"
        assert map_flags(cmd.flags) == {"--json": "output json"}

    def test_list_form(self) -> None:
        cmd = Command.model_validate(
            {"id": "x", "flags": [{"name": "a"}, {"name": "b", "description": "B"}]}
        )
        assert map_flags(cmd.flags) == {"--a": "", "--b": "B"}

    def test_null_flag_entry(self) -> None:
        cmd = Command.model_validate({"id": "x", "flags": {"verbose": None}})
        assert map_flags(cmd.flags) == {"--verbose": ""}

    def test_unknown_flag_fields_kept(self) -> None:
        cmd = Command.model_validate(
            {"id": "x", "flags": {"n": {"description": "d", "multiple": True}}}
        )
        assert cmd.flags["n"].model_extra == {"multiple": True}
