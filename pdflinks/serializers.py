"""
JSON-ready representation of an AnalysisResult.
Field names (page, type, uri, rect, content, characters) are what downstream consumers read.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .core.models import AnalysisResult, ExtractedText, Link, LogEvent

TIMESTAMP_FORMAT = '%H:%M:%S'


def format_links(links: List[Link]) -> List[Dict[str, Any]]:
    formatted = []
    for link in links:
        entry = {
            'page': link.page,
            'type': link.category.value,
            'uri': link.uri,
        }
        if link.rect is not None:
            entry['rect'] = list(link.rect)
        formatted.append(entry)
    return formatted


def format_text_extraction(texts: List[ExtractedText]) -> List[Dict[str, Any]]:
    formatted = []
    for text in texts:
        entry = {
            'page': text.page,
            'content': text.content,
            'characters': text.characters,
        }
        if text.error:
            entry['error'] = text.error
        formatted.append(entry)
    return formatted


def format_logs(logs: List[LogEvent]) -> List[Dict[str, Any]]:
    return [
        {
            'timestamp': event.timestamp.strftime(TIMESTAMP_FORMAT),
            'level': event.severity.value,
            'message': event.message,
        }
        for event in logs
    ]


def format_response(result: AnalysisResult, source_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the serialized form of an analysis.

    Args:
        result: Finished AnalysisResult
        source_url: Where the PDF came from, if it was downloaded

    Returns:
        Dictionary ready for json.dump
    """
    return {
        'metadata': {
            'source': result.source,
            'source_url': source_url,
            'analyzed_at': datetime.now().isoformat(),
            'total_links': len(result.links),
            'pages': len(result.texts),
        },
        'links': format_links(result.links),
        'text_extraction': format_text_extraction(result.texts),
        'analysis_logs': format_logs(result.logs),
    }
