"""gitprovider testing utilities.

Provides an in-memory GitLab, request recording and fixtures for testing
code that uses gitprovider.
"""

from gitprovider.testing.fake_gitlab import FakeGitLab, FakeGitLabError
from gitprovider.testing.fixtures import create_test_client, generate_ssh_public_key
from gitprovider.testing.recording import RecordedCall, RecordingTransport

__all__ = [
    # Fake server
    "FakeGitLab",
    "FakeGitLabError",
    # Recording
    "RecordingTransport",
    "RecordedCall",
    # Helper functions
    "create_test_client",
    "generate_ssh_public_key",
]
