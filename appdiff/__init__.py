"""
AppDiff: version-by-version comparison of analyzed Android application packages.

Browses the packages produced by the external extraction pipeline, inspects the
successive versions of each package and diffs their permissions, bundled
libraries and string resources.
"""

__version__ = "1.0.0"
__author__ = "AppDiff Team"
