from dataclasses import dataclass, field


@dataclass(frozen=True)
class ClassificationResult:
    """Top label of one forward pass."""
    label: str
    confidence: float  # 0.0 - 1.0

    @property
    def confidence_percent(self) -> str:
        return f"{self.confidence * 100:.1f}%"


@dataclass(frozen=True)
class AssetFile:
    public_id: str
    url: str | None


@dataclass(frozen=True)
class AssetMatch:
    """Outcome of a folder search: first match plus the full listing."""
    public_id: str | None
    files: list[AssetFile] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.public_id is not None
