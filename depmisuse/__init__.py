"""
depmisuse - dependency misuse detector

Classifies a project's declared dependencies into unused direct dependencies
and used transitive dependencies, based on the class names its compiled
output references.
"""

__version__ = "0.1.0"
