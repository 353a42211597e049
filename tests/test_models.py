"""Tests for payload and configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from skillhub.models import GlobalConfig, OutputConfig, ProxyRule, SkillDetail, SkillSummary


class TestSkillModels:
    def test_minimal_summary(self) -> None:
        skill = SkillSummary(name="pdf")
        assert skill.description == ""
        assert skill.tags == []
        assert skill.updated_at is None

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            SkillSummary.model_validate({"description": "nameless"})

    def test_extra_fields_survive(self) -> None:
        skill = SkillSummary.model_validate({"name": "pdf", "stars": 3})
        assert skill.model_extra == {"stars": 3}
        assert skill.model_dump(mode="json")["stars"] == 3

    def test_detail_is_a_summary(self) -> None:
        detail = SkillDetail(name="pdf", readme="# PDF")
        assert isinstance(detail, SkillSummary)
        assert detail.file_tree == ""


class TestProxyRule:
    def test_prefix(self) -> None:
        rule = ProxyRule(pattern="/api")
        assert rule.matches("/api/v1/skills")
        assert not rule.matches("/skill/api")

    def test_regex(self) -> None:
        rule = ProxyRule(pattern=r"^/skill/.*\.md")
        assert rule.matches("/skill/pdf.md")
        assert not rule.matches("/skill/pdf")
        assert not rule.matches("/x/skill/pdf.md")

    def test_defaults(self) -> None:
        rule = ProxyRule(pattern="/api")
        assert rule.target == "http://localhost:8080"
        assert rule.change_origin is True
        assert rule.target_host == "localhost:8080"


class TestGlobalConfig:
    def test_round_trip_through_json(self) -> None:
        config = GlobalConfig()
        assert GlobalConfig.model_validate(config.model_dump(mode="json")) == config

    def test_default_dev_server(self) -> None:
        config = GlobalConfig()
        assert (config.dev.host, config.dev.port) == ("127.0.0.1", 5173)
        assert config.build.empty_out_dir is True


class TestOutputConfig:
    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(ValidationError):
            OutputConfig(format="fancy")
