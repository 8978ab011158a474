from unittest.mock import patch

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from core.tracing import init_tracer


@patch("core.tracing.trace.set_tracer_provider")
@patch("core.tracing.BatchSpanProcessor")
def test_disabled_tracing_installs_no_exporter(
    mock_processor, mock_set_provider, monkeypatch
):
    monkeypatch.setenv("DISABLE_TRACING", "true")

    init_tracer("checkout-proxy-test")

    mock_processor.assert_not_called()
    (provider,) = mock_set_provider.call_args.args
    assert isinstance(provider, TracerProvider)
    assert provider.resource.attributes["service.name"] == "checkout-proxy-test"


@patch("core.tracing.trace.set_tracer_provider")
@patch("core.tracing.BatchSpanProcessor")
@patch("core.tracing.OTLPSpanExporter", side_effect=RuntimeError("no collector"))
def test_console_exporter_when_otlp_unavailable(
    mock_otlp, mock_processor, mock_set_provider, monkeypatch
):
    monkeypatch.delenv("DISABLE_TRACING", raising=False)

    init_tracer()

    (exporter,) = mock_processor.call_args.args
    assert isinstance(exporter, ConsoleSpanExporter)
    mock_set_provider.assert_called_once()
