"""Backend package for gosiwon listing search"""

__all__ = [
    "app",
    "config",
    "data_loader",
    "exceptions",
    "format",
    "logging",
    "mock_data",
    "parsing",
    "search",
    "summary",
]
