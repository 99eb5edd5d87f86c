"""Domain Layer: entities, value objects, events and ports of the bulk delete tool."""
