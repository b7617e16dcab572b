"""
CallGraph Explorer: browse a pre-built call graph stored in SQLite.

CallGraph Explorer serves a read-only call graph database, enabling you to:
- Browse source files and the functions they declare
- Pivot into the neighborhood, transitive callers and callees of a function
- Find call paths between two functions
- Assemble a bounded, ranked exploration graph around any function

Usage:
    from cgexplorer.core import GraphStore, Settings
    from cgexplorer.core.service import CallGraphService

    settings = Settings.from_env()
    with GraphStore.from_settings(settings) as store:
        model = CallGraphService(store, settings).explore("pkg.Func", node_budget=40)
"""

__version__ = "0.1.0"
