"""Records exchanged between the collect, extract and notify stages.

Each stage reads and writes these as JSON files. ``from_dict`` ignores
unknown keys and fills missing ones with empty values, since the selected
news file is usually written by hand or by an external tool.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass
class MetadataItem:
    """One feed entry as collected from a syndication feed."""
    title: str
    link: str
    description: str = ""
    pub_date: str = ""
    source: str = ""
    category: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if not self.category:
            data.pop("category")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetadataItem":
        return cls(
            title=_str(data, "title"),
            link=_str(data, "link"),
            description=_str(data, "description"),
            pub_date=_str(data, "pub_date"),
            source=_str(data, "source"),
            category=[str(c) for c in data.get("category") or []],
        )


@dataclass
class MetadataOutput:
    fetched_at: str
    items: List[MetadataItem] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fetched_at": self.fetched_at,
            "total_items": self.total_items,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetadataOutput":
        return cls(
            fetched_at=_str(data, "fetched_at"),
            items=[MetadataItem.from_dict(item) for item in data.get("items") or []],
        )


@dataclass
class SelectedNews:
    """A feed item chosen for full-text extraction."""
    title: str
    link: str
    source: str = ""
    pub_date: str = ""
    summary: str = ""
    category: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if not self.description:
            data.pop("description")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectedNews":
        return cls(
            title=_str(data, "title"),
            link=_str(data, "link"),
            source=_str(data, "source"),
            pub_date=_str(data, "pub_date"),
            summary=_str(data, "summary"),
            category=_str(data, "category"),
            description=_str(data, "description"),
        )


@dataclass
class FinalNews:
    """A selected item together with its extracted article text."""
    title: str
    link: str
    source: str = ""
    pub_date: str = ""
    summary: str = ""
    category: str = ""
    full_article: str = ""
    article_extracted: bool = False
    extraction_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.extraction_error is None:
            data.pop("extraction_error")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinalNews":
        return cls(
            title=_str(data, "title"),
            link=_str(data, "link"),
            source=_str(data, "source"),
            pub_date=_str(data, "pub_date"),
            summary=_str(data, "summary"),
            category=_str(data, "category"),
            full_article=_str(data, "full_article"),
            article_extracted=bool(data.get("article_extracted", False)),
            extraction_error=data.get("extraction_error"),
        )


@dataclass
class FinalOutput:
    generated_at: str
    articles: List[FinalNews] = field(default_factory=list)

    @property
    def total_articles(self) -> int:
        return len(self.articles)

    @property
    def articles_extracted(self) -> int:
        return sum(1 for article in self.articles if article.article_extracted)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "total_articles": self.total_articles,
            "articles_extracted": self.articles_extracted,
            "articles": [article.to_dict() for article in self.articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinalOutput":
        return cls(
            generated_at=_str(data, "generated_at"),
            articles=[FinalNews.from_dict(a) for a in data.get("articles") or []],
        )
