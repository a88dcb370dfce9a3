"""
Catalog assembly and provenance mapping.

assemble_catalog / assemble_sources turn classifier records into the interim
{interface: [api]} catalog (and its provenance) consumed by post-processors;
finalize_catalog produces the sorted, deduplicated result.
"""

from __future__ import annotations

from webcat_engine.web_catalog.domain.models import Catalog, ClassificationResult, ExtractionResult, Sources


def assemble_catalog(result: ClassificationResult) -> Catalog:
    """
    One entry per name of every constructor that has members.

    Aliases of one constructor share the same list object. Two constructors
    resolving to the same name are merged in constructor order.
    """
    catalog: Catalog = {}
    for record in result.constructors.values():
        if not record.member_names:
            continue
        for name in record.names:
            existing = catalog.get(name)
            if existing is None:
                catalog[name] = record.member_names
            elif existing is not record.member_names:
                catalog[name] = existing + [api for api in record.member_names if api not in existing]
    return catalog


def assemble_sources(result: ClassificationResult) -> Sources:
    """interface -> api -> contributing node, mirroring assemble_catalog."""
    sources: Sources = {}
    for record in result.constructors.values():
        if not record.member_names:
            continue
        for name in record.names:
            interface_sources = sources.setdefault(name, {})
            for api_name, source_id in record.sources.items():
                interface_sources.setdefault(api_name, source_id)
    return sources


def finalize_catalog(catalog: Catalog, sources: Sources | None = None) -> ExtractionResult:
    """
    Sort and deduplicate members, drop empty interfaces, trim provenance.

    Interfaces are emitted in name order so equal catalogs serialise equally.
    """
    sources = sources or {}
    final: Catalog = {}
    final_sources: Sources = {}
    for name in sorted(catalog):
        apis = sorted(set(catalog[name]))
        if not apis:
            continue
        final[name] = apis
        interface_sources = sources.get(name, {})
        final_sources[name] = {api: interface_sources[api] for api in apis if api in interface_sources}
    return ExtractionResult(catalog=final, sources=final_sources)
