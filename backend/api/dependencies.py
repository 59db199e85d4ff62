"""Shared dependencies for API routes."""

from services.gemini_client import GeminiClient, get_client
from services.generation.storage import ArtifactStore, LocalArtifactStore


def get_ai_client() -> GeminiClient:
    return get_client()


def get_artifact_store() -> ArtifactStore:
    return LocalArtifactStore()
