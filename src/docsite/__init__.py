"""docsite - tinyhttp documentation site with middleware pages."""

from .config import SiteConfig as SiteConfig, merge_deep as merge_deep
from .context import SiteContext as SiteContext
from .markdown import render as render_markdown
from .package import (
    DENYLIST as DENYLIST,
    Package as Package,
    get_package_detail as get_package_detail,
    list_packages as list_packages,
)
from . import package as package

__version__ = "0.1.0"
