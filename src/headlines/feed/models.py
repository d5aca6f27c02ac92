"""Pydantic models for newsdata.io requests, responses and display records."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SUCCESS_STATUS = "success"


class Category(str, Enum):
    """News category selector."""

    TOP = "top"


class Country(str, Enum):
    """Country selector."""

    GB = "gb"
    US = "us"


class Language(str, Enum):
    """Language selector."""

    EN = "en"


class FeedRequest(BaseModel):
    """An immutable query against the provider."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    category: Category = Category.TOP
    country: Country = Country.GB
    language: Language = Language.EN

    def with_key(self, api_key: str) -> "FeedRequest":
        """Return a copy of this request using a different access key."""
        return self.model_copy(update={"api_key": api_key})

    def query_params(self) -> list[tuple[str, str]]:
        """Query parameters in the order the provider documents them."""
        return [
            ("apikey", self.api_key),
            ("language", self.language.value),
            ("country", self.country.value),
            ("category", self.category.value),
        ]


class Article(BaseModel):
    """A single article as returned by the provider."""

    title: str
    link: str
    description: str | None = None


class FeedResponse(BaseModel):
    """Decoded provider reply.

    ``results`` is only meaningful when ``status`` is ``"success"``; otherwise
    ``code`` identifies the failure.
    """

    status: str
    results: list[Article] = Field(default_factory=list)
    code: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    @classmethod
    def from_api(cls, data: Any) -> "FeedResponse":
        """Parse a decoded JSON body, including the provider's error envelope.

        On errors newsdata.io nests ``{"message", "code"}`` under ``results``
        instead of returning a list; the code is lifted to the top level.
        """
        if isinstance(data, dict) and data.get("status") != SUCCESS_STATUS:
            results = data.get("results")
            if not isinstance(results, list):
                data = dict(data)
                if isinstance(results, dict) and data.get("code") is None:
                    data["code"] = results.get("code")
                data["results"] = []
        return cls.model_validate(data)


class DisplayRecord(BaseModel):
    """A normalized article ready for rendering.

    ``generation`` identifies the fetch that produced the record.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    link: str
    generation: int = 0


class FeedFailure(BaseModel):
    """A failed fetch attempt, delivered to the presentation alongside records."""

    model_config = ConfigDict(frozen=True)

    kind: str
    message: str
    generation: int = 0

    @classmethod
    def from_error(cls, exc: Exception, *, generation: int = 0) -> "FeedFailure":
        return cls(kind=type(exc).__name__, message=str(exc), generation=generation)
