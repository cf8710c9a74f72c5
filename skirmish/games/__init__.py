"""
Games module - Concrete rule sets.

Each game has its own subpackage with:
- Attribute schemas, entity types and actions
- Phase and permission graphs
- Narrative formatting of engine events
"""
