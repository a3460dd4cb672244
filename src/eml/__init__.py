"""EML document assembly pipeline.

Aggregates a data package's survey, project, funding, geometry,
taxonomy and classification records into an Ecological Metadata
Language document and serializes it to XML.
"""

from src.eml.errors import BuildError, EmlPipelineError, NotFoundError
from src.eml.pipeline import produce_eml

__all__ = [
    "BuildError",
    "EmlPipelineError",
    "NotFoundError",
    "produce_eml",
]
