from __future__ import annotations

import pytest

from battlemapper import config
from battlemapper.environment.generators.themes import (
    THEMES,
    Theme,
    ThemeRegistry,
    resolve,
)
from battlemapper.errors import BattleMapperError, InvalidRequest, UnknownPreset


class TestThemeRegistry:
    def test_registered_presets(self) -> None:
        assert THEMES.names() == ("town", "village", "city", "outpost")

    def test_default_theme_is_registered(self) -> None:
        assert resolve(config.DEFAULT_THEME).name == config.DEFAULT_THEME

    def test_resolve_is_case_insensitive(self) -> None:
        assert THEMES.resolve("Village") is THEMES.resolve("village")

    def test_unknown_preset(self) -> None:
        with pytest.raises(UnknownPreset) as excinfo:
            THEMES.resolve("castle")
        error = excinfo.value
        assert error.name == "castle"
        assert "town" in str(error)
        assert isinstance(error, KeyError)
        assert isinstance(error, BattleMapperError)

    def test_duplicate_names_rejected(self) -> None:
        theme = THEMES.resolve("town")
        with pytest.raises(ValueError):
            ThemeRegistry([theme, theme])

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            THEMES._themes["new"] = THEMES.resolve("town")  # type: ignore[index]


class TestBuildRequest:
    def test_defaults_come_from_theme(self) -> None:
        request = THEMES.build_request("village", seed=3)
        theme = THEMES.resolve("village")
        assert request.theme == "village"
        assert request.seed == 3
        assert (request.width, request.height) == (theme.width, theme.height)
        assert request.margin == theme.margin
        assert request.road_growth == "dead_end"

    def test_none_name_uses_default(self) -> None:
        assert THEMES.build_request().theme == config.DEFAULT_THEME

    def test_overrides_win(self) -> None:
        request = THEMES.build_request("town", width=30, road_count=5)
        assert request.width == 30
        assert request.road_count == 5
        assert request.height == THEMES.resolve("town").height

    def test_town_and_city_roads_are_two_wide(self) -> None:
        assert THEMES.build_request("town").road_width == 2
        assert THEMES.build_request("city").road_width == 2
        assert THEMES.build_request("outpost").road_width == 1
        assert THEMES.build_request("town", road_width=3).road_width == 3

    def test_none_overrides_ignored(self) -> None:
        request = THEMES.build_request("town", width=None)
        assert request.width == THEMES.resolve("town").width

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(InvalidRequest):
            THEMES.build_request("town", colour="red")

    def test_small_max_size_pulls_min_down(self) -> None:
        request = THEMES.build_request("village", building_max_size=3)
        assert request.building_max_size == 3
        assert request.building_min_size == 3

    def test_explicit_bad_size_range_rejected(self) -> None:
        with pytest.raises(InvalidRequest):
            THEMES.build_request("town", building_min_size=8, building_max_size=5)

    def test_custom_registry(self) -> None:
        registry = ThemeRegistry(
            [
                Theme(
                    name="arena",
                    description="One hall",
                    width=12,
                    height=12,
                    road_count=0,
                    building_count=1,
                    building_min_size=6,
                    building_max_size=10,
                )
            ]
        )
        request = registry.build_request("arena")
        assert request.building_count == 1
        with pytest.raises(UnknownPreset):
            registry.build_request("town")
