"""
Web Catalog Engine - API catalog extraction from object graph snapshots.

This package contains:
- web_catalog/domain/: ports, models, post-processor directives
- web_catalog/infrastructure/: JSON snapshot graph, config, exceptions
- web_catalog/application/: classifier, assembly, pipeline, import, diagnostics
"""
