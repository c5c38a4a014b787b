"""
Services for Appeal AI API.

Business logic and external service integrations.
"""

from services.appeal_checker import AppealCheckService
from services.completion import CompletionClient
from services.fine_extractor import FineExtractionService

__all__ = [
    "AppealCheckService",
    "CompletionClient",
    "FineExtractionService",
]
