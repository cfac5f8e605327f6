"""
Intranet Mirror Package
Mirrors the tenant → project → activity tree of the intranet to local
storage, downloading every activity file and writing a summary report.

CLI Usage:
    python -m intra_mirror [options]

    Options:
        --config        JSON config file (default: ./config.json)
        --login         Intranet login
        --password      Intranet password
        --output-dir    Output directory (default: ./output)
        --concurrency   Concurrent workers (default: 4)
        --headless      Run the browser headless
        --base-url      Platform root URL
        --no-prompt     Never prompt for missing credentials
        -v, --verbose   Debug logging
"""

from .classifier import Classification, PageClassifier
from .crawler import Crawler, VisitedSet
from .downloader import DownloadResult, DownloadTask, FileDownloader
from .enumeration import RootTask, TenantEnumerator
from .monitor import RunStats, StatsAggregator
from .pool import run_pool
from .report import render_report, write_report
from .run_config import MirrorRunConfig
from .session import BrowserSession, ContentExtractor, PageKind, ResourceNode
from .utils import normalize_label

__all__ = [
    'Classification',
    'PageClassifier',
    'Crawler',
    'VisitedSet',
    'DownloadResult',
    'DownloadTask',
    'FileDownloader',
    'RootTask',
    'TenantEnumerator',
    'RunStats',
    'StatsAggregator',
    'run_pool',
    'render_report',
    'write_report',
    'MirrorRunConfig',
    'BrowserSession',
    'ContentExtractor',
    'PageKind',
    'ResourceNode',
    'normalize_label',
]
