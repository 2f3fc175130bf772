"""Consumer side: search controller, table state and exporters."""

from research_finder.client.exporter import Exporter, ExportArtifact, FileDownloadSink
from research_finder.client.search_controller import SearchController, SearchStatus
from research_finder.client.table_state import SortDirection, TableState

__all__ = [
    "ExportArtifact",
    "Exporter",
    "FileDownloadSink",
    "SearchController",
    "SearchStatus",
    "SortDirection",
    "TableState",
]
