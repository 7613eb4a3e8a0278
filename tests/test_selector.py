"""Tests for source/selector.py"""

import pytest

from ingress_dns.errors import ConfigurationError, SelectorParseError
from ingress_dns.source.selector import Selector, parse_selector, selector_from


class TestParse:
    """Tests for parse_selector()."""

    def test_empty_matches_everything(self):
        selector = parse_selector("")
        assert selector.empty()
        assert selector.matches({})
        assert selector.matches({"a": "b"})

    @pytest.mark.parametrize(
        "text",
        [
            "kubernetes.io/ingress.name in (a b)",
            "a=b c=d",
            "in (a)",
            "a in a",
            "a in (b",
            "a,",
            "a>b",
            "!",
            "-bad-key=x",
        ],
    )
    def test_invalid(self, text):
        with pytest.raises(SelectorParseError):
            parse_selector(text)

    def test_parse_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            parse_selector("a in (b c)")


class TestMatches:
    """Tests for Selector.matches()."""

    @pytest.mark.parametrize(
        "text,labels,expected",
        [
            ("kubernetes.io/ingress.class=nginx", {"kubernetes.io/ingress.class": "nginx"}, True),
            ("kubernetes.io/ingress.class=nginx", {"kubernetes.io/ingress.class": "alb"}, False),
            ("kubernetes.io/ingress.class==nginx", {"kubernetes.io/ingress.class": "nginx"}, True),
            ("kubernetes.io/ingress.class in (alb, nginx)", {"kubernetes.io/ingress.class": "nginx"}, True),
            ("kubernetes.io/ingress.class in (alb, nginx)", {"kubernetes.io/ingress.class": "tectonic"}, False),
            ("kubernetes.io/ingress.class in (alb, nginx)", {}, False),
            ("env notin (prod)", {}, True),
            ("env notin (prod)", {"env": "prod"}, False),
            ("env!=prod", {"env": "dev"}, True),
            ("env!=prod", {}, True),
            ("env", {"env": ""}, True),
            ("env", {}, False),
            ("!env", {}, True),
            ("!env", {"env": "x"}, False),
            ("replicas>2", {"replicas": "3"}, True),
            ("replicas>2", {"replicas": "two"}, False),
            ("replicas<2", {"replicas": "1"}, True),
            ("app=web,tier=front", {"app": "web", "tier": "front"}, True),
            ("app=web,tier=front", {"app": "web", "tier": "back"}, False),
            ("app=", {"app": ""}, True),
        ],
    )
    def test_matches(self, text, labels, expected):
        assert parse_selector(text).matches(labels) is expected


class TestSelectorFrom:
    """Tests for selector_from()."""

    def test_none(self):
        assert selector_from(None).matches({"x": "y"})

    def test_dict(self):
        selector = selector_from({"app": "web-external"})
        assert selector.matches({"app": "web-external", "name": "reverse-proxy"})
        assert not selector.matches({"app": "web-internal"})

    def test_selector_passthrough(self):
        selector = Selector.everything()
        assert selector_from(selector) is selector

    def test_string(self):
        assert selector_from("app=web").matches({"app": "web"})
