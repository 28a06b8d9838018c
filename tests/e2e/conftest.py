"""E2E test fixtures and configuration."""

import pytest

from archive_uploader.orchestration import PublishOrchestrator
from archive_uploader.utils.config import Config
from tests.conftest import FakeWikiSession


@pytest.fixture
def wired_orchestrator(
    config: Config, sources_wiki: FakeWikiSession, commons_wiki: FakeWikiSession
) -> PublishOrchestrator:
    """Orchestrator whose sessions talk to the in-memory wikis.

    Both wikis persist across publishes so that re-runs see earlier writes.
    """
    return PublishOrchestrator(
        config,
        sources_factory=lambda cfg, creds: sources_wiki,
        commons_factory=lambda cfg, creds: commons_wiki,
    )
