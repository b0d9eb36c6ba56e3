"""Tests for pod diagnostics collection."""

from __future__ import annotations

import logging

import pytest
from helpers import FakeKubectl

from chart_tester.core.diagnostics import delimiter, print_pod_details_and_logs
from chart_tester.errors import ChartTesterError


def test_delimiter() -> None:
    assert delimiter("=") == "=" * 100


def test_logs_description_and_container_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="chart_tester")
    kubectl = FakeKubectl(pods=["web-0", "web-1"])

    print_pod_details_and_logs(kubectl, "ns", "app=rel")

    assert kubectl.called("get_pods") == [("ns", "app=rel")]
    assert kubectl.called("describe_pod") == [("ns", "web-0"), ("ns", "web-1")]
    assert kubectl.called("logs") == [("ns", "web-0", "main"), ("ns", "web-1", "main")]
    assert "logs of web-1/main" in caplog.text


def test_listing_failure_is_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    kubectl = FakeKubectl(errors={"get_pods": ChartTesterError("forbidden")})

    print_pod_details_and_logs(kubectl, "ns", "")

    assert kubectl.called("describe_pod") == []
    assert "forbidden" in caplog.text


def test_log_failure_is_swallowed() -> None:
    kubectl = FakeKubectl(pods=["web-0"], errors={"logs": ChartTesterError("gone")})

    print_pod_details_and_logs(kubectl, "ns", "")

    assert kubectl.called("logs") == [("ns", "web-0", "main")]
