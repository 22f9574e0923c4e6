"""Request and result records for image generation tools."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ImageRequest:
    """One image to generate: a prompt and a filename without extension."""
    description: str
    filename: str


@dataclass(frozen=True)
class BatchRequest:
    """Images sharing one output folder, in caller order."""
    output_folder: str
    images: Tuple[ImageRequest, ...]


@dataclass
class ImageResult:
    """Outcome for one ImageRequest. Exactly one of file_path/error is set."""
    request: ImageRequest
    success: bool
    file_path: Optional[Path] = None
    error: Optional[str] = None

    @classmethod
    def saved(cls, request: ImageRequest, file_path: Path) -> "ImageResult":
        return cls(request=request, success=True, file_path=file_path)

    @classmethod
    def failed(cls, request: ImageRequest, error: str) -> "ImageResult":
        return cls(request=request, success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.success:
            data["filePath"] = str(self.file_path)
        else:
            data["error"] = self.error
        data["description"] = self.request.description
        data["filename"] = self.request.filename
        return data


@dataclass
class BatchResult:
    """Aggregate outcome of a batch; results follow request order."""
    results: List[ImageResult] = field(default_factory=list)
    # Set only when the batch failed before any generation started
    error: Optional[str] = None

    @property
    def overall_success(self) -> bool:
        return self.error is None and all(r.success for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"overallSuccess": self.overall_success}
        if self.error is not None:
            data["error"] = self.error
        data["results"] = [r.to_dict() for r in self.results]
        return data
