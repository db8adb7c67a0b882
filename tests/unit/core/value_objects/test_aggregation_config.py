"""
Tests unitaires pour AggregationConfig.
"""

from src.core.value_objects.aggregation_config import AggregationConfig


class TestAggregationConfig:
    """Tests pour la resolution de categorie et de priorite."""

    def test_category_from_table(self) -> None:
        config = AggregationConfig(categories={1: "电影"})
        assert config.category_name(1, "Film") == "电影"

    def test_category_fallback(self) -> None:
        config = AggregationConfig(categories={1: "电影"})
        assert config.category_name(42, " 微电影 ") == "微电影"
        assert config.category_name(None) == ""

    def test_priority(self) -> None:
        config = AggregationConfig(provider_priorities={"a": 90})
        assert config.priority_of("a") == 90
        assert config.priority_of("b", 50) == 50
