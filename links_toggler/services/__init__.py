from .orchestrator import (
    ConversionOrchestrator,
    describe_document_outcome,
    describe_result,
    describe_summary,
)
from .conversion_service import ConversionService

__all__ = ["ConversionOrchestrator",
           "ConversionService",
           "describe_document_outcome",
           "describe_result",
           "describe_summary",
           ]
