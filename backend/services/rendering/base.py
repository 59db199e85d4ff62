"""Abstract base class for document renderers."""

import logging
from abc import ABC, abstractmethod

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import ResolvedSection, StyleTheme

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """A renderer could not produce the document."""


class BaseRenderer(ABC):
    """Base class for rendering strategies.

    Subclasses must implement:
        - name: identifier used in the renderer registry and reported as
          the outcome's generation_method
        - formats: output formats the renderer can produce
        - _render(): build the document bytes
    """

    name: str = ""
    formats: tuple[str, ...] = ()

    def __init__(self, fmt: str = "pdf") -> None:
        if fmt not in self.formats:
            raise ValueError(f"{self.name} cannot render {fmt!r}")
        self.format = fmt

    @property
    def extension(self) -> str:
        return self.format

    @abstractmethod
    def _render(
        self,
        profile: CandidateProfile,
        sections: list[ResolvedSection],
        theme: StyleTheme,
    ) -> bytes:
        """Return the encoded document."""

    def render(
        self,
        profile: CandidateProfile,
        sections: list[ResolvedSection],
        theme: StyleTheme,
    ) -> bytes:
        """Render, wrapping library failures in RenderError."""
        try:
            data = self._render(profile, sections, theme)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"{self.name} failed to render {self.format}: {e}") from e
        if not data:
            raise RenderError(f"{self.name} produced an empty document")
        logger.debug("%s rendered %d bytes of %s", self.name, len(data), self.format)
        return data
