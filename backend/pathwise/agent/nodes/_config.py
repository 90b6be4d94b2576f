"""Access to per-invocation dependencies passed through RunnableConfig."""

from langchain_core.runnables import RunnableConfig

from pathwise.clients.tutor_api import TutorApiClient


def tutor_client_from(config: RunnableConfig) -> TutorApiClient:
    client = config.get("configurable", {}).get("tutor_client")
    if client is None:
        raise RuntimeError("tutor_client missing from graph config")
    return client
