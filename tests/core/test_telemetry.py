"""Tests for OpenTelemetry configuration."""

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanKind, StatusCode
from subway.core import telemetry
from subway.core.config import settings
from subway.core.telemetry import _parse_otlp_headers, get_tracer_provider, service_span


class TestGetTracerProvider:
    """Tests for get_tracer_provider()."""

    def test_returns_none_when_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "OTEL_ENABLED", False)

        assert get_tracer_provider() is None

    def test_creates_provider_once_when_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the provider is built lazily and then reused."""
        monkeypatch.setattr(settings, "OTEL_ENABLED", True)
        monkeypatch.setattr(settings, "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", None)
        monkeypatch.setattr(telemetry, "_tracer_provider", None)

        provider = get_tracer_provider()

        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == settings.OTEL_SERVICE_NAME
        assert get_tracer_provider() is provider


class TestParseOtlpHeaders:
    """Tests for _parse_otlp_headers()."""

    def test_parses_pairs(self) -> None:
        assert _parse_otlp_headers("Authorization=Bearer abc, x-team = subway") == {
            "Authorization": "Bearer abc",
            "x-team": "subway",
        }

    def test_skips_malformed_pairs(self) -> None:
        assert _parse_otlp_headers("novalue,=orphan,key=value") == {"key": "value"}

    def test_empty_string(self) -> None:
        assert _parse_otlp_headers("") == {}


class TestServiceSpan:
    """Tests for service_span()."""

    def test_success_sets_ok_status_and_attributes(
        self, otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter]
    ) -> None:
        _, exporter = otel_enabled_provider

        with service_span("line_service.add_section", "line-service", **{"line.id": 7}) as span:
            span.set_attribute("sections.inserted", 2)

        (finished,) = exporter.get_finished_spans()
        assert finished.name == "line_service.add_section"
        assert finished.kind == SpanKind.INTERNAL
        assert finished.attributes["peer.service"] == "line-service"
        assert finished.attributes["line.id"] == 7
        assert finished.attributes["sections.inserted"] == 2
        assert finished.status.status_code == StatusCode.OK

    def test_exception_sets_error_status(
        self, otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter]
    ) -> None:
        """Test that the exception propagates and is recorded on the span."""
        _, exporter = otel_enabled_provider

        with pytest.raises(RuntimeError), service_span("line_service.delete_station", "line-service"):
            raise RuntimeError("boom")

        (finished,) = exporter.get_finished_spans()
        assert finished.status.status_code == StatusCode.ERROR
        assert any(event.name == "exception" for event in finished.events)
