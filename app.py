import os
import logging
import streamlit as st

# --- OTel & Observability Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter

from prometheus_client import start_http_server

# --- Application Imports ---
from src.config import GameConfig
from src.fsm import QuizState
from src.trivia.adapters.db_manager import DatabaseManager
from src.trivia.adapters.opentdb_client import OpenTDBQuestionSource
from src.trivia.adapters.sqlite_score_store import SQLiteScoreStore
from src.trivia.application.service import TriviaService
from src.trivia.presentation.state_provider import StreamlitStateProvider
from src.trivia.presentation.viewmodel import QuizViewModel
from src.trivia.presentation.views import components, question_view, start_view, summary_view

METRICS_PORT = int(os.getenv("TRIVIA_METRICS_PORT", "8000"))


def configure_observability():
    """
    Sends traces and logs over OTLP when the OTEL env vars are present.
    Starts a background Prometheus server for metrics.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if endpoint and headers:
        resource = Resource.create({"service.name": "trivia-countdown"})

        trace_provider = TracerProvider(resource=resource)
        trace_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
        )
        trace.set_tracer_provider(trace_provider)

        logger_provider = LoggerProvider(resource=resource)
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
        )
        set_logger_provider(logger_provider)

        handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
        logging.getLogger().addHandler(handler)
    else:
        logging.getLogger(__name__).warning(
            "OTEL env vars not set. Telemetry stays local."
        )

    try:
        start_http_server(METRICS_PORT)
        logging.getLogger(__name__).info(f"Prometheus metrics on port {METRICS_PORT}")
    except OSError:
        logging.getLogger(__name__).warning(
            f"Port {METRICS_PORT} already in use (likely Streamlit reload). Skipping."
        )


# --- Bootstrap (once per browser session) ---
if "observability_configured" not in st.session_state:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
    configure_observability()
    st.session_state.observability_configured = True


# --- Dependency Injection (Composition Root) ---
@st.cache_resource
def get_service() -> TriviaService:
    source = OpenTDBQuestionSource()
    store = SQLiteScoreStore(DatabaseManager(GameConfig.DB_PATH))
    return TriviaService(source, store)


def main():
    st.set_page_config(page_title=GameConfig.APP_TITLE, page_icon="🧠", layout="centered")
    components.apply_styles()

    vm = QuizViewModel(get_service(), StreamlitStateProvider())
    vm.ensure_categories()

    components.render_notices(vm.pop_notices())

    # --- Main Router (FSM) ---
    state = vm.current_state

    if state == QuizState.IDLE:
        start_view.render(vm)

    elif state == QuizState.LOADING:
        st.info("Loading questions...")

    elif state == QuizState.PRESENTING:
        question_view.render_active(vm)

    elif state == QuizState.ANSWERED:
        question_view.render_feedback(vm)

    elif state == QuizState.FINISHED:
        summary_view.render(vm)


if __name__ == "__main__":
    main()
