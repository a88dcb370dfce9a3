"""Web Catalog Domain"""

from .directives import (
    AddApisDirective,
    CopyToPrototypeDirective,
    PostProcessorDirective,
    RemoveApisDirective,
    RemoveInterfacesDirective,
)
from .models import (
    CandidateNodes,
    Catalog,
    CatalogDiff,
    ClassificationResult,
    ConstructorRecord,
    ExtractionResult,
    ImportedRelease,
    ImportResult,
    Release,
    ReleaseInfo,
    Sources,
)
from .ports import NodeId, ObjectGraphPort

__all__ = [
    "AddApisDirective",
    "CandidateNodes",
    "Catalog",
    "CatalogDiff",
    "ClassificationResult",
    "ConstructorRecord",
    "CopyToPrototypeDirective",
    "ExtractionResult",
    "ImportedRelease",
    "ImportResult",
    "NodeId",
    "ObjectGraphPort",
    "PostProcessorDirective",
    "Release",
    "ReleaseInfo",
    "RemoveApisDirective",
    "RemoveInterfacesDirective",
    "Sources",
]
