"""Middleware package metadata module."""

from .detail import get_package_detail as get_package_detail
from .errors import MalformedRecordError as MalformedRecordError
from .errors import UpstreamFailure as UpstreamFailure
from .listing import list_packages as list_packages
from .package import DENYLIST as DENYLIST
from .package import Package as Package
from .types import NotApplicable as NotApplicable
from .types import NotFound as NotFound
from .types import PackageDetail as PackageDetail
from .types import PackageSummary as PackageSummary

__all__ = [
    "DENYLIST",
    "MalformedRecordError",
    "NotApplicable",
    "NotFound",
    "Package",
    "PackageDetail",
    "PackageSummary",
    "UpstreamFailure",
    "get_package_detail",
    "list_packages",
]
